"""Pydantic models for the parts of the Spotify Web API the co-playlist uses.

Tracks are passed around as :class:`TrackRef`: only the id is required, and
every field Spotify (or a client) sends is kept as-is so a stored track is
echoed back exactly as it was submitted. Response wrappers type just the
fields the service reads.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Passthrough(BaseModel):
    model_config = ConfigDict(extra="allow")


class Artist(_Passthrough):
    name: str
    id: str | None = None


class Album(_Passthrough):
    name: str
    id: str | None = None


class TrackRef(_Passthrough):
    """A playable track: opaque Spotify id plus whatever display metadata came with it."""

    id: str = Field(min_length=1)
    name: str | None = None
    uri: str | None = None
    duration_ms: int | None = None
    artists: list[Artist] = Field(default_factory=list)
    album: Album | None = None

    @property
    def primary_artist(self) -> str | None:
        return self.artists[0].name if self.artists else None


class SpotifyProfile(_Passthrough):
    """GET /me."""

    id: str
    display_name: str | None = None


class TopTracksResponse(_Passthrough):
    """GET /me/top/tracks."""

    items: list[TrackRef] = Field(default_factory=list)


class _TrackPage(_Passthrough):
    items: list[TrackRef] = Field(default_factory=list)


class SpotifySearchResponse(_Passthrough):
    """GET /search?type=track. Only the ``tracks`` page is requested."""

    tracks: _TrackPage | None = None


class CurrentlyPlaying(_Passthrough):
    """GET /me/player/currently-playing."""

    item: TrackRef | None = None
    progress_ms: int | None = None
    is_playing: bool = False


class SpotifyTokenResponse(BaseModel):
    """Body of a successful POST to Spotify's token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_token: str | None = None
    scope: str | None = None
