"""Admin API endpoints — shared admin token, password check, action-log analytics."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query

from coplaylist.actions.schemas import ActionStatsResponse, RawLogsResponse
from coplaylist.actions.service import ActionAnalytics
from coplaylist.admin.auth import require_admin, verify_password
from coplaylist.admin.schemas import (
    AdminTokenResponse,
    ClearLogsResponse,
    SetAdminTokenRequest,
    SetAdminTokenResponse,
    SuccessResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from coplaylist.admin.token import AdminTokenStore
from coplaylist.dependencies import get_store
from coplaylist.settings import AppSettings, get_settings
from coplaylist.store.base import KeyValueStore

token_router = APIRouter()
router = APIRouter()


def get_token_store(
    store: Annotated[KeyValueStore, Depends(get_store)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> AdminTokenStore:
    """FastAPI dependency that provides an AdminTokenStore."""
    return AdminTokenStore(store, encryption_key=settings.TOKEN_ENCRYPTION_KEY)


def get_analytics(store: Annotated[KeyValueStore, Depends(get_store)]) -> ActionAnalytics:
    return ActionAnalytics(store)


# --- Shared admin token ---


@token_router.get("", response_model=AdminTokenResponse)
async def get_admin_token(
    tokens: Annotated[AdminTokenStore, Depends(get_token_store)],
) -> AdminTokenResponse:
    """Return the admin's Spotify token for participants to act with."""
    token = await tokens.get()
    return AdminTokenResponse(token=token, status="active" if token else "none")


@token_router.post("", response_model=SetAdminTokenResponse)
async def set_admin_token(
    body: SetAdminTokenRequest,
    tokens: Annotated[AdminTokenStore, Depends(get_token_store)],
) -> SetAdminTokenResponse:
    return SetAdminTokenResponse(token=await tokens.set(body.token))


@token_router.delete("", response_model=SuccessResponse)
async def clear_admin_token(
    tokens: Annotated[AdminTokenStore, Depends(get_token_store)],
) -> SuccessResponse:
    await tokens.clear()
    return SuccessResponse()


# --- Password check ---


@router.post("/verify", response_model=VerifyPasswordResponse)
async def verify(
    body: VerifyPasswordRequest,
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> VerifyPasswordResponse:
    """Check the admin password. A wrong password is a normal 200 response."""
    if verify_password(body.password, settings):
        return VerifyPasswordResponse(success=True, message="Password verified")
    return VerifyPasswordResponse(success=False, message="Invalid password")


# --- Action log ---


@router.get(
    "/logs",
    response_model=ActionStatsResponse | RawLogsResponse,
    dependencies=[Depends(require_admin)],
)
async def get_logs(
    analytics: Annotated[ActionAnalytics, Depends(get_analytics)],
    log_format: Annotated[Literal["stats", "raw"], Query(alias="format")] = "stats",
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> ActionStatsResponse | RawLogsResponse:
    """Aggregated click statistics, or the most recent raw entries."""
    if log_format == "raw":
        return RawLogsResponse(logs=await analytics.get_raw_logs(user_id, limit))

    stats = await analytics.get_button_click_stats(user_id)
    users = await analytics.get_all_users()
    return ActionStatsResponse(stats=stats, users=users, total_users=len(users))


@router.delete("/logs", response_model=ClearLogsResponse, dependencies=[Depends(require_admin)])
async def clear_logs(
    analytics: Annotated[ActionAnalytics, Depends(get_analytics)],
) -> ClearLogsResponse:
    return ClearLogsResponse(deleted=await analytics.clear_logs())
