"""Action-log HTTP endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from coplaylist.actions.schemas import LogActionRequest, LogActionResponse
from coplaylist.actions.service import ActionLogger
from coplaylist.dependencies import get_store
from coplaylist.store.base import KeyValueStore


def get_action_logger(store: Annotated[KeyValueStore, Depends(get_store)]) -> ActionLogger:
    """FastAPI dependency that provides an ActionLogger."""
    return ActionLogger(store)


class ActionLogRouter:
    """Class-based router for client-reported user actions."""

    def __init__(self) -> None:
        self.router = APIRouter()
        self.router.add_api_route("", self.log_action, methods=["POST"], response_model=LogActionResponse)

    async def log_action(
        self,
        body: LogActionRequest,
        action_logger: Annotated[ActionLogger, Depends(get_action_logger)],
    ) -> LogActionResponse:
        """Append one action to the log."""
        if not await action_logger.log_action(body.user_id, body.action, body.metadata):
            raise HTTPException(status_code=500, detail="Failed to log action")
        return LogActionResponse(success=True)


_instance = ActionLogRouter()
router = _instance.router
