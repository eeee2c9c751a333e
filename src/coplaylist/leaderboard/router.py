"""Leaderboard HTTP endpoints — class-based router delegating to LeaderboardStore."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from coplaylist.constants import VoteAction
from coplaylist.dependencies import get_store
from coplaylist.leaderboard.schemas import AddVotesRequest, LeaderboardStatus, RemoveTrackRequest, VoteRequest
from coplaylist.leaderboard.service import LeaderboardStore
from coplaylist.settings import AppSettings, get_settings
from coplaylist.spotify.models import TrackRef
from coplaylist.store.base import KeyValueStore

logger = logging.getLogger(__name__)


def get_leaderboard(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> LeaderboardStore:
    """FastAPI dependency that provides a LeaderboardStore bound to the app's backend."""
    return LeaderboardStore(
        store,
        increment_on_duplicate=settings.LEADERBOARD_INCREMENT_ON_DUPLICATE_ADD,
        auto_sort=settings.LEADERBOARD_AUTO_SORT,
    )


class LeaderboardRouter:
    """Class-based router for the shared leaderboard."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self._register_routes()

    def _register_routes(self) -> None:
        r = self.router
        options: dict[str, Any] = {"response_model": LeaderboardStatus, "response_model_exclude_unset": True}
        r.add_api_route("", self.get_status, methods=["GET"], **options)
        r.add_api_route("", self.initialize, methods=["POST"], **options)
        r.add_api_route("/reset", self.reset, methods=["POST"], **options)
        r.add_api_route("/add", self.add, methods=["POST"], **options)
        r.add_api_route("/remove", self.remove, methods=["POST"], **options)
        r.add_api_route("/vote", self.vote, methods=["POST"], **options)
        r.add_api_route("/vote/add", self.add_votes, methods=["POST"], **options)

    async def get_status(
        self,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Current entries and initialized flag."""
        return await leaderboard.get_status()

    async def initialize(
        self,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Mark the leaderboard as initialized for this session."""
        return await leaderboard.initialize()

    async def reset(
        self,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Clear every entry and the initialized flag."""
        return await leaderboard.reset()

    async def add(
        self,
        body: Annotated[dict[str, Any], Body()],
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Add a track. Accepts ``{"track": {...}}`` or the bare track object."""
        payload = body.get("track", body)
        try:
            track = TrackRef.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail="Request body must contain a track with an id") from exc
        return await leaderboard.add(track)

    async def remove(
        self,
        body: RemoveTrackRequest,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Remove a track; unknown ids leave the leaderboard unchanged."""
        return await leaderboard.remove(body.id)

    async def vote(
        self,
        body: VoteRequest,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Apply a single up- or down-vote."""
        if body.action == VoteAction.INCREMENT:
            return await leaderboard.increment_votes(body.id)
        if body.action == VoteAction.DECREMENT:
            return await leaderboard.decrement_votes(body.id)
        logger.warning("Rejected vote for %s with invalid action %r", body.id, body.action)
        raise HTTPException(status_code=400, detail=f"Invalid action: {body.action!r}")

    async def add_votes(
        self,
        body: AddVotesRequest,
        leaderboard: Annotated[LeaderboardStore, Depends(get_leaderboard)],
    ) -> LeaderboardStatus:
        """Add several votes to one track at once."""
        return await leaderboard.add_votes(body.track_id, body.votes)


_instance = LeaderboardRouter()
router = _instance.router
