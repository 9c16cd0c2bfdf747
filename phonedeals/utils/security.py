# phonedeals/utils/security.py
import jwt

from phonedeals.domain.errors import Unauthorized
from phonedeals.utils.settings import JWT_ALGORITHM, JWT_SECRET


def decode_token(token: str) -> str:
    """Verify a bearer token and return the principal id it carries."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise Unauthorized("Failed to authenticate token")

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise Unauthorized("Failed to authenticate token")
    return str(user_id)
