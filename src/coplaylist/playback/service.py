"""Current-song register backed by the key-value store."""

import logging

from pydantic import ValidationError

from coplaylist.constants import CURRENT_SONG_LOCK, StoreKeys
from coplaylist.playback.schemas import CurrentSongState
from coplaylist.spotify.models import TrackRef
from coplaylist.store.base import KeyValueStore
from coplaylist.store.exceptions import StoreError

logger = logging.getLogger(__name__)


class CurrentSongRegister:
    """Holds at most one now-playing track plus progress and play/pause state.

    The track, progress and play flag live under separate keys
    (``current_song``, ``song_progress``, ``is_playing``). Progress and play
    updates are ignored while no track is set.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def set(self, track: TrackRef, progress_ms: int = 0, is_playing: bool = True) -> CurrentSongState:
        """Replace the now-playing state unconditionally."""
        async with self._store.lock(CURRENT_SONG_LOCK):
            await self._store.set(StoreKeys.CURRENT_SONG, track.model_dump(mode="json", exclude_unset=True))
            await self._store.set(StoreKeys.SONG_PROGRESS, progress_ms)
            await self._store.set(StoreKeys.IS_PLAYING, is_playing)
        logger.info("Current song set to %s (progress=%d, playing=%s)", track.id, progress_ms, is_playing)
        return CurrentSongState(song=track, progress_ms=progress_ms, is_playing=is_playing)

    async def get(self) -> CurrentSongState:
        """Return the current state; empty when no track is set or the store is unreadable."""
        try:
            song = await self._load_song()
            if song is None:
                return CurrentSongState()
            progress = await self._store.get(StoreKeys.SONG_PROGRESS)
            playing = await self._store.get(StoreKeys.IS_PLAYING)
        except StoreError:
            logger.exception("Failed to read current song")
            return CurrentSongState()
        return CurrentSongState(
            song=song,
            progress_ms=progress if isinstance(progress, int) and progress >= 0 else 0,
            is_playing=playing is True or playing == "true",
        )

    async def update_progress(self, progress_ms: int) -> CurrentSongState:
        async with self._store.lock(CURRENT_SONG_LOCK):
            if await self._load_song() is not None:
                await self._store.set(StoreKeys.SONG_PROGRESS, progress_ms)
        return await self.get()

    async def update_playing(self, is_playing: bool) -> CurrentSongState:
        async with self._store.lock(CURRENT_SONG_LOCK):
            if await self._load_song() is not None:
                await self._store.set(StoreKeys.IS_PLAYING, is_playing)
        return await self.get()

    async def reset(self) -> CurrentSongState:
        """Clear the register back to the empty state."""
        async with self._store.lock(CURRENT_SONG_LOCK):
            await self._store.delete(StoreKeys.CURRENT_SONG, StoreKeys.SONG_PROGRESS, StoreKeys.IS_PLAYING)
        logger.info("Current song cleared")
        return CurrentSongState()

    async def _load_song(self) -> TrackRef | None:
        raw = await self._store.get(StoreKeys.CURRENT_SONG)
        if raw is None:
            return None
        try:
            return TrackRef.model_validate(raw)
        except ValidationError as exc:
            raise StoreError("get", f"{StoreKeys.CURRENT_SONG} holds a malformed track") from exc
