"""Abstract key-value store interface shared by all backends."""

import json
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any


class KeyValueStore(ABC):
    """Minimal async key-value interface the services are written against.

    Scalar values are JSON-encoded on write and decoded on read, so callers
    store and receive plain Python structures. A stored string that is not
    valid JSON is returned as-is. List values (``lpush``/``lrange``) hold raw
    strings.

    ``lock(name)`` returns an async context manager providing mutual exclusion
    for read-modify-write sequences across every caller sharing the backend.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the decoded value for *key*, or ``None`` if absent."""

    @abstractmethod
    async def set(self, key: str, value: Any, *, ex: int | None = None) -> None:
        """Store *value* under *key*, optionally expiring after *ex* seconds."""

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete *keys*; return the number that existed."""

    @abstractmethod
    async def lpush(self, key: str, *values: str) -> int:
        """Prepend *values* to the list at *key*; return the new length."""

    @abstractmethod
    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        """Return list items between *start* and *stop* inclusive (negative indexes count from the end)."""

    @abstractmethod
    async def keys(self, pattern: str) -> list[str]:
        """Return every key matching the glob *pattern*."""

    @abstractmethod
    def lock(self, name: str) -> AbstractAsyncContextManager[None]:
        """Return an async context manager holding the named lock."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the backend is reachable."""

    async def close(self) -> None:
        """Release backend resources."""

    @staticmethod
    def encode(value: Any) -> str:
        return json.dumps(value)

    @staticmethod
    def decode(raw: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return raw
