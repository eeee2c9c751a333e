"""Per-user action log and analytics."""

from coplaylist.actions.router import router

__all__ = ["router"]
