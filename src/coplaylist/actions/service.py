"""Action log writer and analytics over the key-value store.

Each action is stored as its own key, ``user_action:<entry_id>``, and its id
is pushed onto three index lists so it can be found by recency, by user, and
by action name::

    user_action:all
    user_action:user:<user_id>
    user_action:action:<action>

Every failure is logged and turned into a safe default; logging an action
must never break the request that triggered it.
"""

import json
import logging
import uuid
from collections import Counter
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from coplaylist.actions.schemas import ActionLogEntry
from coplaylist.constants import ACTION_LOG_PREFIX, TRACKED_ACTIONS
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class ActionLogger:
    """Appends user actions to the log."""

    def __init__(self, store: KeyValueStore, prefix: str = ACTION_LOG_PREFIX) -> None:
        self._store = store
        self._prefix = prefix

    async def log_action(self, user_id: str, action: str, metadata: dict[str, Any] | None = None) -> bool:
        """Record an action. Returns False if the store rejected it."""
        timestamp = datetime.now(UTC).isoformat()
        entry = ActionLogEntry(timestamp=timestamp, user_id=user_id, action=action, metadata=metadata or {})
        entry_id = f"{timestamp}-{uuid.uuid4().hex[:7]}"

        try:
            await self._store.set(f"{self._prefix}{entry_id}", entry.model_dump(by_alias=True))
            await self._store.lpush(f"{self._prefix}all", entry_id)
            await self._store.lpush(f"{self._prefix}user:{user_id}", entry_id)
            await self._store.lpush(f"{self._prefix}action:{action}", entry_id)
        except StoreError:
            logger.exception("Failed to log action %s for user %s", action, user_id)
            return False
        return True


class ActionAnalytics:
    """Read side of the action log for the admin dashboard and export script."""

    def __init__(self, store: KeyValueStore, prefix: str = ACTION_LOG_PREFIX) -> None:
        self._store = store
        self._prefix = prefix

    async def get_button_click_stats(self, user_id: str | None = None) -> dict[str, int]:
        """Count tracked actions, with per-vote-type and per-view breakdowns."""
        try:
            entries = await self._load_entries(await self._entry_ids(user_id))
        except StoreError:
            logger.exception("Failed to analyze action logs")
            return {}

        stats: Counter[str] = Counter()
        for entry in entries:
            if entry.action not in TRACKED_ACTIONS:
                continue
            stats[entry.action] += 1
            if entry.action == "vote":
                stats[f"vote_{entry.metadata.get('voteType')}"] += 1
            elif entry.action == "change_view":
                stats[f"view_{entry.metadata.get('viewName')}"] += 1
        return dict(stats)

    async def get_all_users(self) -> list[str]:
        """Distinct user ids that have logged at least one action, in first-seen order."""
        try:
            entries = await self._load_entries(await self._entry_ids(None))
        except StoreError:
            logger.exception("Failed to list action log users")
            return []
        return list(dict.fromkeys(entry.user_id for entry in entries if entry.user_id))

    async def get_raw_logs(self, user_id: str | None = None, limit: int = 100) -> list[ActionLogEntry]:
        """Most recent entries first, optionally for one user."""
        try:
            return await self._load_entries(await self._entry_ids(user_id, limit))
        except StoreError:
            logger.exception("Failed to read raw action logs")
            return []

    async def clear_logs(self) -> int:
        """Delete every action log key. Returns how many keys were removed."""
        keys = await self._store.keys(f"{self._prefix}*")
        if not keys:
            return 0
        removed = await self._store.delete(*keys)
        logger.info("Cleared %d action log keys", removed)
        return removed

    async def _entry_ids(self, user_id: str | None, limit: int | None = None) -> list[str]:
        key = f"{self._prefix}user:{user_id}" if user_id else f"{self._prefix}all"
        stop = limit - 1 if limit is not None else -1
        return await self._store.lrange(key, 0, stop)

    async def _load_entries(self, entry_ids: list[str]) -> list[ActionLogEntry]:
        entries: list[ActionLogEntry] = []
        for entry_id in entry_ids:
            raw = await self._store.get(f"{self._prefix}{entry_id}")
            if raw is None:
                continue
            if isinstance(raw, str):
                # Entries written by older clients were JSON-encoded twice.
                try:
                    raw = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning("Skipping unreadable action log entry %s", entry_id)
                    continue
            try:
                entries.append(ActionLogEntry.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed action log entry %s", entry_id)
        return entries
