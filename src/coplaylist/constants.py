"""Centralized constants for the co-playlist service."""

import enum
from dataclasses import dataclass

# --- Application metadata ---

APP_TITLE = "Spotify Co-Playlist API"
APP_DESCRIPTION = "Shared leaderboard voting, session state and admin-controlled playback"
APP_VERSION = "0.1.0"
SERVICE_NAME = "coplaylist"


# --- Route configuration ---


@dataclass(frozen=True, slots=True)
class _Route:
    """A route prefix paired with its OpenAPI tag."""

    prefix: str
    tag: str


class Routes:
    """API route prefixes and tags — single source of truth."""

    LEADERBOARD = _Route("/api/leaderboard", "leaderboard")
    CURRENT_SONG = _Route("/api/currentSong", "current-song")
    SESSION = _Route("/api/session", "session")
    ADMIN_TOKEN = _Route("/api/admin-token", "admin")
    ADMIN = _Route("/api/admin", "admin")
    GENRE_TRACKER = _Route("/api/genreTracker", "genres")
    LOG_ACTION = _Route("/api/log-action", "actions")
    AUTH = _Route("/auth", "auth")
    HEALTH = "/healthz"


# --- Key-value store layout ---


class StoreKeys(enum.StrEnum):
    """Keys under which service state is persisted in the key-value store."""

    LEADERBOARD = "spotify_leaderboard"
    LEADERBOARD_STATUS = "spotify_leaderboard_status"
    CURRENT_SONG = "current_song"
    SONG_PROGRESS = "song_progress"
    IS_PLAYING = "is_playing"
    SESSION_STATUS = "session_status"
    SESSION_TYPE = "session_type"
    ADMIN_TOKEN = "admin_token"
    ADMIN_SPOTIFY_TOKENS = "admin_spotify_tokens"
    GENRE_TRACKER = "genre_tracker"


ACTION_LOG_PREFIX = "user_action:"
PKCE_VERIFIER_PREFIX = "pkce_verifier:"
LEADERBOARD_LOCK = "lock:leaderboard"
CURRENT_SONG_LOCK = "lock:current_song"
GENRE_TRACKER_LOCK = "lock:genre_tracker"


class VoteAction(enum.StrEnum):
    """Vote directions accepted by the leaderboard."""

    INCREMENT = "increment"
    DECREMENT = "decrement"


class StorageBackend(enum.StrEnum):
    """Supported key-value storage backends."""

    MEMORY = "memory"
    REDIS = "redis"


# Actions counted by the admin analytics view
TRACKED_ACTIONS = ("change_view", "vote", "add_song")


# --- Spotify ---

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

ME_URL = f"{SPOTIFY_API_BASE}/me"
SEARCH_URL = f"{SPOTIFY_API_BASE}/search"
TOP_TRACKS_URL = f"{SPOTIFY_API_BASE}/me/top/tracks"
QUEUE_URL = f"{SPOTIFY_API_BASE}/me/player/queue"
CURRENTLY_PLAYING_URL = f"{SPOTIFY_API_BASE}/me/player/currently-playing"
PLAY_URL = f"{SPOTIFY_API_BASE}/me/player/play"
PAUSE_URL = f"{SPOTIFY_API_BASE}/me/player/pause"
NEXT_URL = f"{SPOTIFY_API_BASE}/me/player/next"

SPOTIFY_SCOPES = "user-read-private user-read-email user-top-read user-modify-playback-state user-read-playback-state"

# Spotify client retry defaults
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0  # seconds
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds

PKCE_VERIFIER_LENGTH = 128
PKCE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"


# --- Last.fm ---

LASTFM_API_URL = "https://ws.audioscrobbler.com/2.0/"


# --- Default configuration values ---

DEFAULT_SPOTIFY_REDIRECT_URI = "http://localhost:8000/auth/callback"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_OAUTH_STATE_TTL_SECONDS = 300  # 5 minutes
DEFAULT_TOKEN_EXPIRY_BUFFER_SECONDS = 60  # Refresh tokens this many seconds before expiry
DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
