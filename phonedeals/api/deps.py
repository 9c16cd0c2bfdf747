# phonedeals/api/deps.py
from functools import lru_cache

from fastapi import Header

from phonedeals.domain.errors import Unauthorized
from phonedeals.services.lock_service import LockService
from phonedeals.utils.security import decode_token


def get_current_user_id(authorization: str | None = Header(default=None)) -> str:
    """Principal id from `Authorization: Bearer <jwt>`."""
    if not authorization:
        raise Unauthorized("No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("No token provided")

    return decode_token(token.strip())


@lru_cache
def get_lock_service() -> LockService:
    return LockService()
