"""In-process key-value store for tests and single-instance deployments."""

import asyncio
import fnmatch
import time
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError


class MemoryStore(KeyValueStore):
    """Dictionary-backed store with Redis-like semantics.

    Values go through the same JSON round-trip as the Redis backend so that
    services behave identically on both. State is lost when the process exits.
    """

    def __init__(self) -> None:
        self._data: dict[str, str | list[str]] = {}
        self._expires_at: dict[str, float] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get(self, key: str) -> Any | None:
        self._evict_if_expired(key)
        raw = self._data.get(key)
        if raw is None:
            return None
        if isinstance(raw, list):
            raise StoreError("get", f"WRONGTYPE key {key!r} holds a list")
        return self.decode(raw)

    async def set(self, key: str, value: Any, *, ex: int | None = None) -> None:
        try:
            self._data[key] = self.encode(value)
        except (TypeError, ValueError) as exc:
            raise StoreError("set", f"value for {key!r} is not JSON serializable") from exc
        if ex is not None:
            self._expires_at[key] = time.monotonic() + ex
        else:
            self._expires_at.pop(key, None)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            self._evict_if_expired(key)
            if self._data.pop(key, None) is not None:
                removed += 1
            self._expires_at.pop(key, None)
        return removed

    async def lpush(self, key: str, *values: str) -> int:
        self._evict_if_expired(key)
        items = self._data.setdefault(key, [])
        if not isinstance(items, list):
            raise StoreError("lpush", f"WRONGTYPE key {key!r} holds a value")
        for value in values:
            items.insert(0, value)
        return len(items)

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        self._evict_if_expired(key)
        items = self._data.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise StoreError("lrange", f"WRONGTYPE key {key!r} holds a value")

        length = len(items)
        if start < 0:
            start = max(length + start, 0)
        if stop < 0:
            stop = length + stop
        if start >= length or start > stop:
            return []
        return items[start : stop + 1]

    async def keys(self, pattern: str) -> list[str]:
        for key in list(self._expires_at):
            self._evict_if_expired(key)
        return [key for key in self._data if fnmatch.fnmatchcase(key, pattern)]

    @asynccontextmanager
    async def lock(self, name: str) -> AsyncIterator[None]:
        async with self._locks[name]:
            yield

    async def ping(self) -> bool:
        return True

    def _evict_if_expired(self, key: str) -> None:
        deadline = self._expires_at.get(key)
        if deadline is not None and deadline <= time.monotonic():
            self._data.pop(key, None)
            del self._expires_at[key]
