"""Now-playing register shared by every participant."""

from coplaylist.playback.router import router

__all__ = ["router"]
