"""Current-song HTTP endpoints — class-based router delegating to CurrentSongRegister."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from coplaylist.auth.exceptions import TokenNotFoundError, TokenRefreshError
from coplaylist.auth.router import get_token_manager
from coplaylist.auth.tokens import AdminTokenManager
from coplaylist.dependencies import get_store
from coplaylist.playback.schemas import CurrentSongResponse, SetCurrentSongRequest, UpdateCurrentSongRequest
from coplaylist.playback.service import CurrentSongRegister
from coplaylist.store.base import KeyValueStore


def get_register(store: Annotated[KeyValueStore, Depends(get_store)]) -> CurrentSongRegister:
    """FastAPI dependency that provides a CurrentSongRegister."""
    return CurrentSongRegister(store)


class CurrentSongRouter:
    """Class-based router for the now-playing record."""

    def __init__(self) -> None:
        self.router = APIRouter()
        for method, endpoint in (
            ("GET", self.get_current),
            ("POST", self.set_current),
            ("PATCH", self.update_current),
            ("DELETE", self.clear_current),
        ):
            self.router.add_api_route("", endpoint, methods=[method], response_model=CurrentSongResponse)
        self.router.add_api_route("/sync", self.sync_from_spotify, methods=["POST"], response_model=CurrentSongResponse)

    async def get_current(
        self,
        register: Annotated[CurrentSongRegister, Depends(get_register)],
    ) -> CurrentSongResponse:
        """Now-playing track, progress and play state."""
        return CurrentSongResponse.from_state(await register.get())

    async def set_current(
        self,
        body: SetCurrentSongRequest,
        register: Annotated[CurrentSongRegister, Depends(get_register)],
    ) -> CurrentSongResponse:
        """Replace the now-playing track."""
        state = await register.set(body.song, progress_ms=body.progress_ms, is_playing=body.is_playing)
        return CurrentSongResponse.from_state(state)

    async def update_current(
        self,
        body: UpdateCurrentSongRequest,
        register: Annotated[CurrentSongRegister, Depends(get_register)],
    ) -> CurrentSongResponse:
        """Update progress and/or play state; ignored while no track is set."""
        if body.progress_ms is not None:
            await register.update_progress(body.progress_ms)
        if body.is_playing is not None:
            await register.update_playing(body.is_playing)
        return CurrentSongResponse.from_state(await register.get())

    async def clear_current(
        self,
        register: Annotated[CurrentSongRegister, Depends(get_register)],
    ) -> CurrentSongResponse:
        """Clear the now-playing record."""
        return CurrentSongResponse.from_state(await register.reset())

    async def sync_from_spotify(
        self,
        register: Annotated[CurrentSongRegister, Depends(get_register)],
        manager: Annotated[AdminTokenManager, Depends(get_token_manager)],
    ) -> CurrentSongResponse:
        """Copy the admin's Spotify now-playing state into the register."""
        try:
            client = manager.spotify_client(await manager.get_valid_token())
            playing = await client.get_currently_playing()
        except TokenNotFoundError as exc:
            raise HTTPException(status_code=409, detail="Admin has not logged in to Spotify") from exc
        except TokenRefreshError as exc:
            raise HTTPException(status_code=502, detail=exc.detail) from exc

        if playing is None or playing.item is None:
            return CurrentSongResponse.from_state(await register.reset())
        state = await register.set(playing.item, progress_ms=playing.progress_ms or 0, is_playing=playing.is_playing)
        return CurrentSongResponse.from_state(state)


_instance = CurrentSongRouter()
router = _instance.router
