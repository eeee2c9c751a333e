"""Genre vote tracking."""

from coplaylist.genres.router import router

__all__ = ["router"]
