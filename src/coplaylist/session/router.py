"""Session HTTP endpoints — class-based router delegating to SessionFlags."""

from typing import Annotated

from fastapi import APIRouter, Depends

from coplaylist.dependencies import get_store
from coplaylist.session.schemas import (
    MessageResponse,
    SessionStatusResponse,
    SessionTypeResponse,
    SetSessionRequest,
    SetSessionResponse,
    SetSessionTypeRequest,
)
from coplaylist.session.service import SessionFlags
from coplaylist.store.base import KeyValueStore


def get_session_flags(store: Annotated[KeyValueStore, Depends(get_store)]) -> SessionFlags:
    """FastAPI dependency that provides SessionFlags."""
    return SessionFlags(store)


class SessionRouter:
    """Class-based router for the session active flag and session type."""

    def __init__(self) -> None:
        self.router = APIRouter()
        r = self.router
        r.add_api_route("", self.get_status, methods=["GET"], response_model=SessionStatusResponse)
        r.add_api_route("", self.set_status, methods=["POST"], response_model=SetSessionResponse)
        r.add_api_route("/type", self.get_type, methods=["GET"], response_model=SessionTypeResponse)
        r.add_api_route("/type", self.set_type, methods=["POST"], response_model=MessageResponse)
        r.add_api_route("/type", self.clear_type, methods=["DELETE"], response_model=MessageResponse)

    async def get_status(
        self,
        flags: Annotated[SessionFlags, Depends(get_session_flags)],
    ) -> SessionStatusResponse:
        """Whether a session is running."""
        return SessionStatusResponse(session="active" if await flags.is_active() else "inactive")

    async def set_status(
        self,
        body: SetSessionRequest,
        flags: Annotated[SessionFlags, Depends(get_session_flags)],
    ) -> SetSessionResponse:
        """Start or stop the session."""
        await flags.set_active(body.session == "active")
        return SetSessionResponse(session="active" if await flags.is_active() else "inactive")

    async def get_type(
        self,
        flags: Annotated[SessionFlags, Depends(get_session_flags)],
    ) -> SessionTypeResponse:
        return SessionTypeResponse(session_type=await flags.get_type() or "none")

    async def set_type(
        self,
        body: SetSessionTypeRequest,
        flags: Annotated[SessionFlags, Depends(get_session_flags)],
    ) -> MessageResponse:
        await flags.set_type(body.session_type)
        return MessageResponse(message="Session type updated")

    async def clear_type(
        self,
        flags: Annotated[SessionFlags, Depends(get_session_flags)],
    ) -> MessageResponse:
        await flags.clear_type()
        return MessageResponse(message="Session type cleared successfully")


_instance = SessionRouter()
router = _instance.router
