"""Spotify Web API client and models."""

from coplaylist.spotify.client import SpotifyClient
from coplaylist.spotify.exceptions import (
    SpotifyAuthError,
    SpotifyClientError,
    SpotifyRateLimitError,
    SpotifyRequestError,
    SpotifyServerError,
)

__all__ = [
    "SpotifyClient",
    "SpotifyAuthError",
    "SpotifyClientError",
    "SpotifyRateLimitError",
    "SpotifyRequestError",
    "SpotifyServerError",
]
