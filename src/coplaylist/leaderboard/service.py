"""Leaderboard store — vote aggregation over the key-value backend."""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from coplaylist.constants import LEADERBOARD_LOCK, StoreKeys
from coplaylist.leaderboard.schemas import LeaderboardEntry, LeaderboardStatus
from coplaylist.spotify.models import TrackRef
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class LeaderboardStore:
    """Ranked collection of candidate tracks and their vote tallies.

    Entries live as a JSON list under ``spotify_leaderboard``; the initialized
    flag lives under ``spotify_leaderboard_status``. There is at most one
    entry per track id. Votes have no floor and may go negative.

    Every mutation is a read-modify-write cycle run under the backend's
    ``lock:leaderboard`` lock, so concurrent votes are never lost.

    Ordering contract: entries keep insertion order and only :meth:`sort`
    reorders them, unless the store is built with ``auto_sort=True``, in which
    case every mutating operation sorts before it returns.

    Args:
        store: Backend holding the leaderboard keys.
        increment_on_duplicate: When True, :meth:`add` on a track that is
            already listed counts as one more vote; otherwise it is a no-op.
        auto_sort: Sort by votes after every mutation.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        increment_on_duplicate: bool = True,
        auto_sort: bool = False,
    ) -> None:
        self._store = store
        self._increment_on_duplicate = increment_on_duplicate
        self._auto_sort = auto_sort

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_status(self) -> LeaderboardStatus:
        """Return a consistent snapshot of the entries and the initialized flag.

        An unreachable backend or corrupt stored list reads as the empty,
        uninitialized leaderboard.
        """
        try:
            async with self._store.lock(LEADERBOARD_LOCK):
                entries = await self._load_entries()
                initialized = await self._load_initialized()
        except StoreError:
            logger.exception("Failed to read leaderboard")
            return LeaderboardStatus()
        return LeaderboardStatus(entries=entries, initialized=initialized)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, track: TrackRef) -> LeaderboardStatus:
        """Add *track* with one vote, or handle a duplicate per policy."""

        def _apply(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
            existing = self._find(entries, track.id)
            if existing is None:
                entries.append(LeaderboardEntry(track=track, votes=1))
                logger.info("Added track %s to leaderboard", track.id)
            elif self._increment_on_duplicate:
                existing.votes += 1
            return entries

        return await self._mutate(_apply)

    async def remove(self, track_id: str) -> LeaderboardStatus:
        """Remove the entry for *track_id*; absent ids are ignored."""
        return await self._mutate(lambda entries: [e for e in entries if e.track.id != track_id])

    async def increment_votes(self, track_id: str) -> LeaderboardStatus:
        return await self.add_votes(track_id, 1)

    async def decrement_votes(self, track_id: str) -> LeaderboardStatus:
        return await self.add_votes(track_id, -1)

    async def add_votes(self, track_id: str, votes: int) -> LeaderboardStatus:
        """Add *votes* (any sign) to an existing entry; unknown ids are a no-op."""

        def _apply(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
            existing = self._find(entries, track_id)
            if existing is not None:
                existing.votes += votes
            else:
                logger.debug("Vote for unknown track %s ignored", track_id)
            return entries

        return await self._mutate(_apply)

    async def sort(self) -> LeaderboardStatus:
        """Order entries by votes descending; ties keep their relative order."""
        return await self._mutate(self._sorted)

    async def initialize(self) -> LeaderboardStatus:
        """Mark the leaderboard initialized without touching its entries."""
        async with self._store.lock(LEADERBOARD_LOCK):
            await self._store.set(StoreKeys.LEADERBOARD_STATUS, True)
        return await self.get_status()

    async def reset(self) -> LeaderboardStatus:
        """Remove every entry and clear the initialized flag."""
        async with self._store.lock(LEADERBOARD_LOCK):
            await self._store.set(StoreKeys.LEADERBOARD, [])
            await self._store.set(StoreKeys.LEADERBOARD_STATUS, False)
        logger.info("Leaderboard reset")
        return LeaderboardStatus(entries=[], initialized=False)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _mutate(
        self, apply: Callable[[list[LeaderboardEntry]], list[LeaderboardEntry]]
    ) -> LeaderboardStatus:
        async with self._store.lock(LEADERBOARD_LOCK):
            entries = apply(await self._load_entries())
            if self._auto_sort:
                entries = self._sorted(entries)
            await self._store.set(StoreKeys.LEADERBOARD, [self._dump(entry) for entry in entries])
            initialized = await self._load_initialized()
        return LeaderboardStatus(entries=entries, initialized=initialized)

    async def _load_entries(self) -> list[LeaderboardEntry]:
        raw = await self._store.get(StoreKeys.LEADERBOARD)
        if not raw:
            return []
        if not isinstance(raw, list):
            raise StoreError("get", f"{StoreKeys.LEADERBOARD} does not hold a list")
        try:
            return [LeaderboardEntry.model_validate(item) for item in raw]
        except ValidationError as exc:
            raise StoreError("get", f"{StoreKeys.LEADERBOARD} holds malformed entries") from exc

    async def _load_initialized(self) -> bool:
        raw = await self._store.get(StoreKeys.LEADERBOARD_STATUS)
        return raw is True or raw == "true"

    @staticmethod
    def _find(entries: list[LeaderboardEntry], track_id: str) -> LeaderboardEntry | None:
        return next((entry for entry in entries if entry.track.id == track_id), None)

    @staticmethod
    def _sorted(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
        return sorted(entries, key=lambda entry: entry.votes, reverse=True)

    @staticmethod
    def _dump(entry: LeaderboardEntry) -> dict[str, Any]:
        return {"track": entry.track.model_dump(mode="json", exclude_unset=True), "votes": entry.votes}
