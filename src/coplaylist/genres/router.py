"""Genre tracker HTTP endpoints — class-based router delegating to GenreTracker."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from coplaylist.dependencies import get_store
from coplaylist.genres.schemas import (
    AddGenreVotesRequest,
    GenreMessageResponse,
    GenreTrackerResponse,
    TrackGenresRequest,
)
from coplaylist.genres.service import GenreTracker
from coplaylist.lastfm.client import LastFmClient
from coplaylist.settings import AppSettings, get_settings
from coplaylist.store.base import KeyValueStore

logger = logging.getLogger(__name__)


def get_genre_tracker(store: Annotated[KeyValueStore, Depends(get_store)]) -> GenreTracker:
    """FastAPI dependency that provides a GenreTracker."""
    return GenreTracker(store)


def get_lastfm_client(settings: Annotated[AppSettings, Depends(get_settings)]) -> LastFmClient:
    """Last.fm client keyed from settings; 503 when no API key is configured."""
    if not settings.LASTFM_API_KEY:
        raise HTTPException(status_code=503, detail="Last.fm is not configured")
    return LastFmClient(settings.LASTFM_API_KEY)


class GenreTrackerRouter:
    """Class-based router for session genre statistics."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("", self.get_genres, methods=["GET"], response_model=GenreTrackerResponse)
        self.router.add_api_route("", self.add_votes, methods=["POST"], response_model=GenreMessageResponse)
        self.router.add_api_route("", self.clear, methods=["DELETE"], response_model=GenreMessageResponse)
        self.router.add_api_route(
            "/track", self.add_votes_for_track, methods=["POST"], response_model=GenreTrackerResponse
        )

    async def get_genres(
        self,
        tracker: Annotated[GenreTracker, Depends(get_genre_tracker)],
    ) -> GenreTrackerResponse:
        return GenreTrackerResponse(genre_tracker=await tracker.get())

    async def add_votes(
        self,
        body: AddGenreVotesRequest,
        tracker: Annotated[GenreTracker, Depends(get_genre_tracker)],
    ) -> GenreMessageResponse:
        """Count the tags of a Last.fm ``track.gettoptags`` response."""
        names = [tag.name for tag in body.toptags.tag]
        if not names:
            raise HTTPException(status_code=400, detail="No tags provided")
        logger.debug("Adding genre votes for %s", names)
        await tracker.add_votes_from_tags(names)
        return GenreMessageResponse(message="Votes added successfully")

    async def add_votes_for_track(
        self,
        body: TrackGenresRequest,
        tracker: Annotated[GenreTracker, Depends(get_genre_tracker)],
        lastfm: Annotated[LastFmClient, Depends(get_lastfm_client)],
    ) -> GenreTrackerResponse:
        """Fetch a track's top tags from Last.fm and count them."""
        tags = await lastfm.get_track_tags(body.track, body.artist)
        if tags is None:
            raise HTTPException(status_code=502, detail="Last.fm lookup failed")
        names = [tag.name for tag in tags.toptags.tag]
        if not names:
            return GenreTrackerResponse(genre_tracker=await tracker.get())
        return GenreTrackerResponse(genre_tracker=await tracker.add_votes_from_tags(names))

    async def clear(
        self,
        tracker: Annotated[GenreTracker, Depends(get_genre_tracker)],
    ) -> GenreMessageResponse:
        await tracker.clear()
        return GenreMessageResponse(message="Genre tracker cleared successfully")


_instance = GenreTrackerRouter()
router = _instance.router
