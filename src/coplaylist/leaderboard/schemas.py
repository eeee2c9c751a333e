"""Pydantic schemas for leaderboard state and requests."""

from pydantic import BaseModel, ConfigDict, Field

from coplaylist.spotify.models import TrackRef


class LeaderboardEntry(BaseModel):
    """One candidate track and its running vote tally."""

    track: TrackRef
    votes: int = 1


class LeaderboardStatus(BaseModel):
    """Snapshot of the leaderboard.

    Serialized with the entries under ``list`` for the web client.
    """

    model_config = ConfigDict(populate_by_name=True)

    entries: list[LeaderboardEntry] = Field(default_factory=list, alias="list")
    initialized: bool = False


class RemoveTrackRequest(BaseModel):
    """Body for POST /api/leaderboard/remove."""

    id: str = Field(min_length=1)


class VoteRequest(BaseModel):
    """Body for POST /api/leaderboard/vote."""

    id: str = Field(min_length=1)
    action: str


class AddVotesRequest(BaseModel):
    """Body for POST /api/leaderboard/vote/add."""

    model_config = ConfigDict(populate_by_name=True)

    track_id: str = Field(alias="trackId", min_length=1)
    votes: int
