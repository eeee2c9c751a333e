"""Listening-party session flags."""

from coplaylist.session.router import router

__all__ = ["router"]
