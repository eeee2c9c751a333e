"""Pydantic models for the Last.fm API responses the service reads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LastFmTag(BaseModel):
    """One entry of a ``toptags.tag`` array; only ``name`` is used."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    count: int | None = None
    url: str | None = None


class TopTags(BaseModel):
    model_config = ConfigDict(extra="allow")

    tag: list[LastFmTag] = []


class TrackTopTags(BaseModel):
    """Response from ``track.gettoptags``."""

    model_config = ConfigDict(extra="allow")

    toptags: TopTags


class SimilarTrackArtist(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    url: str | None = None


class SimilarTrack(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    artist: SimilarTrackArtist
    match: float = 0.0
    url: str | None = None

    @field_validator("match", mode="before")
    @classmethod
    def _parse_match(cls, value: object) -> object:
        # Last.fm sends the match score as a string.
        return value if value not in (None, "") else 0.0


class TrackSearchMatch(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    artist: str
    url: str | None = None
    listeners: int | None = None
