"""Pydantic schemas for the current-song register."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_serializer

from coplaylist.spotify.models import TrackRef


class CurrentSongState(BaseModel):
    """Now-playing track with playback progress; ``song`` is None when nothing is set."""

    song: TrackRef | None = None
    progress_ms: int = Field(default=0, ge=0)
    is_playing: bool = False

    @field_serializer("song")
    def _serialize_song(self, song: TrackRef | None) -> dict[str, Any] | None:
        # Echo the track exactly as it was submitted.
        return song.model_dump(mode="json", exclude_unset=True) if song is not None else None


class CurrentSongResponse(BaseModel):
    """Response for the current-song endpoints."""

    current_song: CurrentSongState = Field(serialization_alias="currentSong")
    status: Literal["active", "none"]

    @classmethod
    def from_state(cls, state: CurrentSongState) -> "CurrentSongResponse":
        return cls(current_song=state, status="active" if state.song else "none")


class SetCurrentSongRequest(BaseModel):
    """Body for POST /api/currentSong."""

    song: TrackRef
    progress_ms: int = Field(default=0, ge=0)
    is_playing: bool = True


class UpdateCurrentSongRequest(BaseModel):
    """Body for PATCH /api/currentSong; omitted fields are left unchanged."""

    progress_ms: int | None = Field(default=None, ge=0)
    is_playing: bool | None = None
