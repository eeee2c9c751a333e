"""Application settings loaded from environment variables."""

import functools

from pydantic_settings import BaseSettings

from coplaylist.constants import (
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    DEFAULT_OAUTH_STATE_TTL_SECONDS,
    DEFAULT_REDIS_URL,
    DEFAULT_SPOTIFY_REDIRECT_URI,
    DEFAULT_TOKEN_EXPIRY_BUFFER_SECONDS,
)


class AppSettings(BaseSettings):
    """Co-playlist service configuration."""

    # Storage
    STORAGE_BACKEND: str = "memory"  # "memory" or "redis"
    REDIS_URL: str = DEFAULT_REDIS_URL
    STORE_LOCK_TIMEOUT_SECONDS: float = DEFAULT_LOCK_TIMEOUT_SECONDS

    # Spotify (PKCE public client, no secret)
    SPOTIFY_CLIENT_ID: str = ""
    SPOTIFY_REDIRECT_URI: str = DEFAULT_SPOTIFY_REDIRECT_URI
    OAUTH_STATE_TTL_SECONDS: int = DEFAULT_OAUTH_STATE_TTL_SECONDS
    TOKEN_EXPIRY_BUFFER_SECONDS: int = DEFAULT_TOKEN_EXPIRY_BUFFER_SECONDS

    # Last.fm
    LASTFM_API_KEY: str = ""

    # Admin
    ADMIN_PASSWORD: str = ""
    TOKEN_ENCRYPTION_KEY: str = ""  # Fernet key; empty stores the admin token in plain text

    # Leaderboard behaviour
    LEADERBOARD_INCREMENT_ON_DUPLICATE_ADD: bool = True
    LEADERBOARD_AUTO_SORT: bool = True

    # CORS
    CORS_ALLOWED_ORIGINS: str = "http://localhost:5173"  # comma-separated origins

    # Rate limiting
    RATE_LIMIT_AUTH_PER_MINUTE: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_prefix": ""}


@functools.lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return cached application settings singleton."""
    return AppSettings()
