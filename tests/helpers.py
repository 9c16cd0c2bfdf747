# tests/helpers.py
from contextlib import contextmanager

import jwt

from phonedeals.domain.errors import StockLocked

JWT_SECRET = "test-secret-0123456789-abcdefghijklmnop"

VALID_ADDRESS = {
    "street": "1 Main St",
    "city": "Sydney",
    "state": "NSW",
    "zip": "2000",
    "country": "Australia",
}


def token_for(user_id: str, secret: str = JWT_SECRET, claim: str = "id") -> str:
    return jwt.encode({claim: user_id}, secret, algorithm="HS256")


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {token_for(user_id)}"}


class InProcessLockService:
    """Same contract as LockService, kept in a dict instead of Redis."""

    def __init__(self):
        self.held = {}
        self.history = []

    @contextmanager
    def hold_listing_locks(self, listing_ids, owner):
        ids = sorted(set(listing_ids))
        if any(i in self.held for i in ids):
            raise StockLocked()
        for i in ids:
            self.held[i] = owner
        self.history.append(ids)
        try:
            yield ids
        finally:
            for i in ids:
                self.held.pop(i, None)


class RecordingNotifier:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send_order_notification(self, user_id, order_id, total_amount):
        if self.fail:
            raise ConnectionError("broker down")
        self.sent.append((user_id, order_id, total_amount))
