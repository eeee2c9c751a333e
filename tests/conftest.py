"""Shared fixtures: an in-memory store, test settings and an app client bound to both."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient

from coplaylist.main import app
from coplaylist.middleware import RateLimitMiddleware
from coplaylist.settings import AppSettings, get_settings
from coplaylist.spotify.models import TrackRef
from coplaylist.store.memory import MemoryStore

TEST_FERNET_KEY = Fernet.generate_key().decode()
ADMIN_PASSWORD = "test-admin-password"


def _test_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "SPOTIFY_CLIENT_ID": "test-client-id",
        "SPOTIFY_REDIRECT_URI": "http://localhost:8000/auth/callback",
        "TOKEN_ENCRYPTION_KEY": TEST_FERNET_KEY,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "LASTFM_API_KEY": "test-lastfm-key",
    }
    values.update(overrides)
    return AppSettings(**values)


@pytest.fixture
def settings() -> AppSettings:
    return _test_settings()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_track() -> Callable[..., TrackRef]:
    """Factory for minimal Spotify tracks: ``make_track("t1")``."""

    def _make(track_id: str, name: str | None = None, **extra: Any) -> TrackRef:
        return TrackRef(
            id=track_id,
            name=name or f"Track {track_id}",
            uri=f"spotify:track:{track_id}",
            artists=[{"name": f"Artist {track_id}"}],
            **extra,
        )

    return _make


def _reset_rate_limiter() -> None:
    current = getattr(app, "middleware_stack", None)
    while current is not None:
        if isinstance(current, RateLimitMiddleware):
            current._hits.clear()
            return
        current = getattr(current, "app", None)


@pytest.fixture
def client(memory_store: MemoryStore, settings: AppSettings) -> Generator[TestClient]:
    """TestClient over the real app, with a fresh MemoryStore and test settings."""
    app.state.store = memory_store
    app.dependency_overrides[get_settings] = lambda: settings
    _reset_rate_limiter()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.store = None


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_PASSWORD}"}
