"""Redis-backed key-value store (``redis.asyncio``)."""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from coplaylist.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """Production backend over a shared Redis instance.

    Locks are Redis distributed locks, so read-modify-write sequences are
    serialized across every process talking to the same Redis.
    """

    def __init__(self, client: Redis, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        self._redis = client
        self._lock_timeout = lock_timeout

    @classmethod
    def from_url(cls, url: str, *, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> "RedisStore":
        """Create a store from a ``redis://`` URL."""
        return cls(Redis.from_url(url, decode_responses=True), lock_timeout=lock_timeout)

    async def get(self, key: str) -> Any | None:
        with self._translate_errors("get"):
            raw = await self._redis.get(key)
        if raw is None:
            return None
        return self.decode(raw)

    async def set(self, key: str, value: Any, *, ex: int | None = None) -> None:
        try:
            encoded = self.encode(value)
        except (TypeError, ValueError) as exc:
            raise StoreError("set", f"value for {key!r} is not JSON serializable") from exc
        with self._translate_errors("set"):
            await self._redis.set(key, encoded, ex=ex)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        with self._translate_errors("delete"):
            removed: int = await self._redis.delete(*keys)
        return removed

    async def lpush(self, key: str, *values: str) -> int:
        with self._translate_errors("lpush"):
            length: int = await self._redis.lpush(key, *values)
        return length

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        with self._translate_errors("lrange"):
            items: list[str] = await self._redis.lrange(key, start, stop)
        return items

    async def keys(self, pattern: str) -> list[str]:
        with self._translate_errors("keys"):
            found: list[str] = [key async for key in self._redis.scan_iter(match=pattern)]
        return found

    @asynccontextmanager
    async def lock(self, name: str) -> AsyncIterator[None]:
        redis_lock = self._redis.lock(name, timeout=self._lock_timeout, blocking_timeout=self._lock_timeout)
        with self._translate_errors("lock"):
            acquired = await redis_lock.acquire()
        if not acquired:
            raise StoreError("lock", f"timed out acquiring {name!r}")
        try:
            yield
        finally:
            try:
                await redis_lock.release()
            except LockError:
                # Lock expired before release; another holder may already own it.
                logger.warning("Lock %s expired before release", name)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            logger.exception("Redis ping failed")
            return False

    async def close(self) -> None:
        await self._redis.aclose()

    @staticmethod
    @contextmanager
    def _translate_errors(operation: str) -> Iterator[None]:
        try:
            yield
        except RedisError as exc:
            raise StoreError(operation, str(exc)) from exc
