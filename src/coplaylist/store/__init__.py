"""Key-value storage backends."""

from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError
from coplaylist.store.memory import MemoryStore
from coplaylist.store.redis_store import RedisStore

__all__ = ["KeyValueStore", "MemoryStore", "RedisStore", "StoreError"]
