"""Pydantic schemas for the genre tracker."""

from pydantic import BaseModel, ConfigDict, Field

from coplaylist.lastfm.models import TrackTopTags


class GenreCount(BaseModel):
    genre: str
    votes: int = 1


class AddGenreVotesRequest(TrackTopTags):
    """Body for POST /api/genreTracker — the Last.fm ``track.gettoptags`` payload."""


class GenreTrackerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    genre_tracker: list[GenreCount] = Field(alias="genreTracker")


class GenreMessageResponse(BaseModel):
    success: bool = True
    message: str


class TrackGenresRequest(BaseModel):
    """Body for POST /api/genreTracker/track: a track to look up on Last.fm."""

    track: str = Field(min_length=1)
    artist: str = Field(min_length=1)
