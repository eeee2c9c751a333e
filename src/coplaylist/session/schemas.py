"""Pydantic schemas for session endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SessionState = Literal["active", "inactive"]


class SessionStatusResponse(BaseModel):
    session: SessionState


class SetSessionRequest(BaseModel):
    """Body for POST /api/session."""

    session: SessionState


class SetSessionResponse(BaseModel):
    success: bool = True
    session: SessionState


class SessionTypeResponse(BaseModel):
    """``sessionType`` is ``"none"`` when no type is set."""

    model_config = ConfigDict(populate_by_name=True)

    session_type: str = Field(alias="sessionType")


class SetSessionTypeRequest(BaseModel):
    """Body for POST /api/session/type."""

    model_config = ConfigDict(populate_by_name=True)

    session_type: str = Field(alias="sessionType", min_length=1)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
