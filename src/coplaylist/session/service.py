"""Session flags: whether a listening party is running, and what kind."""

import logging

from coplaylist.constants import StoreKeys
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class SessionFlags:
    """Two independent store-wide values with plain getter/setter semantics.

    Reads never raise: an unreachable backend reads as an inactive session
    with no type.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def is_active(self) -> bool:
        try:
            status = await self._store.get(StoreKeys.SESSION_STATUS)
        except StoreError:
            logger.exception("Failed to read session status")
            return False
        return status is True or status == "true"

    async def set_active(self, active: bool) -> None:
        logger.info("Session %s", "activated" if active else "deactivated")
        await self._store.set(StoreKeys.SESSION_STATUS, active)

    async def get_type(self) -> str | None:
        try:
            session_type = await self._store.get(StoreKeys.SESSION_TYPE)
        except StoreError:
            logger.exception("Failed to read session type")
            return None
        return session_type if isinstance(session_type, str) else None

    async def set_type(self, session_type: str) -> None:
        logger.info("Session type set to %s", session_type)
        await self._store.set(StoreKeys.SESSION_TYPE, session_type)

    async def clear_type(self) -> None:
        await self._store.delete(StoreKeys.SESSION_TYPE)
