"""Genre vote counters fed by Last.fm track tags."""

import logging
from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from coplaylist.constants import GENRE_TRACKER_LOCK, StoreKeys
from coplaylist.genres.schemas import GenreCount
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)

_genre_list = TypeAdapter(list[GenreCount])


class GenreTracker:
    """Counts how often each genre tag appears on tracks added to the session.

    The stored list is kept sorted by votes, highest first.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def get(self) -> list[GenreCount]:
        """Current counters; empty when unset, malformed or unreachable."""
        try:
            return await self._load()
        except StoreError:
            logger.exception("Failed to read genre tracker")
            return []

    async def add_votes_from_tags(self, tag_names: Iterable[str]) -> list[GenreCount]:
        """Add one vote per tag name; unseen genres start at one."""
        async with self._store.lock(GENRE_TRACKER_LOCK):
            counts = await self._load()
            by_genre = {entry.genre: entry for entry in counts}
            for name in tag_names:
                if name in by_genre:
                    by_genre[name].votes += 1
                else:
                    entry = GenreCount(genre=name, votes=1)
                    by_genre[name] = entry
                    counts.append(entry)
            counts.sort(key=lambda entry: entry.votes, reverse=True)
            await self._store.set(StoreKeys.GENRE_TRACKER, [entry.model_dump() for entry in counts])
        return counts

    async def clear(self) -> list[GenreCount]:
        await self._store.set(StoreKeys.GENRE_TRACKER, [])
        logger.info("Genre tracker cleared")
        return []

    async def _load(self) -> list[GenreCount]:
        raw = await self._store.get(StoreKeys.GENRE_TRACKER)
        if not raw:
            return []
        try:
            return _genre_list.validate_python(raw)
        except ValidationError:
            logger.warning("Discarding malformed genre tracker data")
            return []
