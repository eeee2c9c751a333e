"""Admin token, password check and action-log endpoints."""

from coplaylist.admin.router import router, token_router

__all__ = ["router", "token_router"]
