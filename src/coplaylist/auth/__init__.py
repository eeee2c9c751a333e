"""Spotify PKCE login and admin token lifecycle."""

from coplaylist.auth.router import router

__all__ = ["router"]
