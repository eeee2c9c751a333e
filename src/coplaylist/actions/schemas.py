"""Pydantic schemas for the action log."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ActionLogEntry(BaseModel):
    """A single logged user action, as stored under ``user_action:<id>``."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    user_id: str = Field(alias="userId")
    action: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class LogActionRequest(BaseModel):
    """Body for POST /api/log-action."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    action: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class LogActionResponse(BaseModel):
    success: bool


class ActionStatsResponse(BaseModel):
    """Aggregated analytics for GET /api/admin/logs?format=stats."""

    model_config = ConfigDict(populate_by_name=True)

    stats: dict[str, int]
    users: list[str]
    total_users: int = Field(serialization_alias="totalUsers")


class RawLogsResponse(BaseModel):
    """Raw entries for GET /api/admin/logs?format=raw."""

    logs: list[ActionLogEntry]
