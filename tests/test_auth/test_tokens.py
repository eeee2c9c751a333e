"""Tests for AdminTokenManager."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx

from coplaylist.admin.token import AdminTokenStore
from coplaylist.auth.exceptions import TokenNotFoundError, TokenRefreshError
from coplaylist.auth.tokens import AdminTokenManager
from coplaylist.constants import CURRENTLY_PLAYING_URL, SPOTIFY_TOKEN_URL, StoreKeys
from coplaylist.crypto import TokenEncryptor
from coplaylist.settings import AppSettings
from coplaylist.spotify.models import SpotifyTokenResponse
from coplaylist.store.memory import MemoryStore


async def _store_tokens(
    store: MemoryStore,
    settings: AppSettings,
    access_token: str = "existing-access-token",
    expires_at: datetime | None = None,
    refresh_token: str | None = "test-refresh-token",
) -> None:
    encryptor = TokenEncryptor(settings.TOKEN_ENCRYPTION_KEY)
    await store.set(
        StoreKeys.ADMIN_SPOTIFY_TOKENS,
        {
            "access_token": access_token,
            "refresh_token": encryptor.encrypt(refresh_token) if refresh_token else None,
            "expires_at": (expires_at or datetime.now(UTC) + timedelta(hours=1)).isoformat(),
        },
    )


async def test_get_valid_token_returns_cached(memory_store: MemoryStore, settings: AppSettings) -> None:
    await _store_tokens(memory_store, settings, access_token="valid-token")
    assert await AdminTokenManager(memory_store, settings).get_valid_token() == "valid-token"


async def test_not_logged_in(memory_store: MemoryStore, settings: AppSettings) -> None:
    with pytest.raises(TokenNotFoundError):
        await AdminTokenManager(memory_store, settings).get_valid_token()


@respx.mock
async def test_expired_token_is_refreshed_and_published(memory_store: MemoryStore, settings: AppSettings) -> None:
    await _store_tokens(memory_store, settings, expires_at=datetime.now(UTC) - timedelta(minutes=5))
    route = respx.post(SPOTIFY_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "new-access-token", "expires_in": 3600})
    )
    manager = AdminTokenManager(memory_store, settings)

    assert await manager.get_valid_token() == "new-access-token"
    assert route.called
    assert "refresh_token=test-refresh-token" in route.calls[0].request.content.decode()

    published = AdminTokenStore(memory_store, encryption_key=settings.TOKEN_ENCRYPTION_KEY)
    assert await published.get() == "new-access-token"

    # Spotify did not rotate the refresh token, so the old one is kept.
    record = await memory_store.get(StoreKeys.ADMIN_SPOTIFY_TOKENS)
    encryptor = TokenEncryptor(settings.TOKEN_ENCRYPTION_KEY)
    assert encryptor.decrypt(record["refresh_token"]) == "test-refresh-token"


@respx.mock
async def test_token_inside_buffer_is_refreshed(memory_store: MemoryStore, settings: AppSettings) -> None:
    soon = datetime.now(UTC) + timedelta(seconds=settings.TOKEN_EXPIRY_BUFFER_SECONDS // 2)
    await _store_tokens(memory_store, settings, expires_at=soon)
    respx.post(SPOTIFY_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "fresh", "expires_in": 3600, "refresh_token": "rt2"})
    )
    assert await AdminTokenManager(memory_store, settings).get_valid_token() == "fresh"


@respx.mock
async def test_refresh_failure(memory_store: MemoryStore, settings: AppSettings) -> None:
    await _store_tokens(memory_store, settings, expires_at=datetime.now(UTC) - timedelta(minutes=5))
    respx.post(SPOTIFY_TOKEN_URL).mock(return_value=httpx.Response(400, json={"error": "invalid_grant"}))
    with pytest.raises(TokenRefreshError) as exc_info:
        await AdminTokenManager(memory_store, settings).get_valid_token()
    assert "HTTP 400" in exc_info.value.detail


async def test_expired_without_refresh_token(memory_store: MemoryStore, settings: AppSettings) -> None:
    await _store_tokens(
        memory_store, settings, expires_at=datetime.now(UTC) - timedelta(minutes=5), refresh_token=None
    )
    with pytest.raises(TokenRefreshError):
        await AdminTokenManager(memory_store, settings).get_valid_token()


@respx.mock
async def test_spotify_401_forces_refresh(memory_store: MemoryStore, settings: AppSettings) -> None:
    await _store_tokens(memory_store, settings, access_token="revoked")
    respx.post(SPOTIFY_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "replacement", "expires_in": 3600})
    )
    player = respx.get(CURRENTLY_PLAYING_URL)
    player.side_effect = [httpx.Response(401), httpx.Response(204)]

    manager = AdminTokenManager(memory_store, settings)
    client = manager.spotify_client(await manager.get_valid_token())
    assert await client.get_currently_playing() is None
    assert player.calls[1].request.headers["Authorization"] == "Bearer replacement"


async def test_save_and_clear(memory_store: MemoryStore, settings: AppSettings) -> None:
    manager = AdminTokenManager(memory_store, settings)
    token = SpotifyTokenResponse(access_token="at", expires_in=3600, refresh_token="rt")
    assert await manager.save(token) == "at"
    assert await manager.get_valid_token() == "at"

    await manager.clear()
    with pytest.raises(TokenNotFoundError):
        await manager.get_valid_token()
    assert await AdminTokenStore(memory_store, settings.TOKEN_ENCRYPTION_KEY).get() == ""
