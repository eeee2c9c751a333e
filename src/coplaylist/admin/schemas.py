"""Pydantic schemas for admin API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

# --- Admin token ---


class AdminTokenResponse(BaseModel):
    """``token`` is empty and ``status`` is ``"none"`` when no token is stored."""

    token: str
    status: Literal["active", "none"]


class SetAdminTokenRequest(BaseModel):
    token: str = Field(min_length=1)


class SetAdminTokenResponse(BaseModel):
    success: bool = True
    token: str


class SuccessResponse(BaseModel):
    success: bool = True


# --- Password check ---


class VerifyPasswordRequest(BaseModel):
    password: str = Field(min_length=1)


class VerifyPasswordResponse(BaseModel):
    success: bool
    message: str


# --- Action log maintenance ---


class ClearLogsResponse(BaseModel):
    success: bool = True
    deleted: int
