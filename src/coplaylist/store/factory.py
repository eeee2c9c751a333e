"""Build the configured key-value backend."""

import logging

from coplaylist.constants import StorageBackend
from coplaylist.settings import AppSettings
from coplaylist.store.base import KeyValueStore
from coplaylist.store.memory import MemoryStore
from coplaylist.store.redis_store import RedisStore

logger = logging.getLogger(__name__)


def create_store(settings: AppSettings) -> KeyValueStore:
    """Return a store for ``STORAGE_BACKEND``; raises ValueError for unknown names."""
    backend = StorageBackend(settings.STORAGE_BACKEND.strip().lower())
    if backend is StorageBackend.REDIS:
        logger.info("Using Redis storage backend")
        return RedisStore.from_url(settings.REDIS_URL, lock_timeout=settings.STORE_LOCK_TIMEOUT_SECONDS)
    logger.info("Using in-memory storage backend; state is lost on restart")
    return MemoryStore()
