# phonedeals/services/lock_service.py
from contextlib import contextmanager

import redis

from phonedeals.domain.errors import StockLocked
from phonedeals.utils.retry import contention_retry, redis_retry
from phonedeals.utils.settings import REDIS_URL, STOCK_LOCK_ATTEMPTS, STOCK_LOCK_TTL_SECONDS
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete as one atomic step: only the owner may release
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


def listing_lock_key(listing_id: int) -> str:
    return f"listing:{listing_id}:lock"


class LockService:
    """
    Per-listing mutual exclusion for stock mutation.

    - acquire: SET key owner NX EX ttl
    - release: Lua compare-and-delete on the owner token
    - hold_listing_locks: takes every lock in sorted id order, releases all on exit
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = STOCK_LOCK_TTL_SECONDS,
        attempts: int = STOCK_LOCK_ATTEMPTS,
    ):
        self.redis = client or redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl = ttl
        self.attempts = attempts

    @redis_retry()
    def acquire_listing_lock(self, listing_id: int, owner: str) -> bool:
        key = listing_lock_key(listing_id)
        logger.info(f"Acquire lock {key} for {owner}")
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=self.ttl))

    @redis_retry()
    def release_listing_lock(self, listing_id: int, owner: str) -> bool:
        key = listing_lock_key(listing_id)
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    def _acquire_with_wait(self, listing_id: int, owner: str) -> bool:
        @contention_retry(self.attempts)
        def attempt():
            return self.acquire_listing_lock(listing_id, owner)

        return attempt()

    @contextmanager
    def hold_listing_locks(self, listing_ids, owner: str):
        acquired = []
        try:
            for listing_id in sorted(set(listing_ids)):
                if not self._acquire_with_wait(listing_id, owner):
                    logger.warning(f"Listing {listing_id} is locked by another checkout")
                    raise StockLocked()
                acquired.append(listing_id)
            yield acquired
        finally:
            for listing_id in reversed(acquired):
                try:
                    self.release_listing_lock(listing_id, owner)
                except redis.RedisError as e:
                    # the lock still expires on its own after ttl
                    logger.warning(f"Failed to release lock for listing {listing_id}: {e}")
