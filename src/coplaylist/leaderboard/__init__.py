"""Shared track leaderboard and voting."""

from coplaylist.leaderboard.router import router

__all__ = ["router"]
