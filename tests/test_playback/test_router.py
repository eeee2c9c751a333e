"""Tests for the /api/currentSong endpoints."""

from datetime import UTC, datetime, timedelta

import httpx
import respx
from fastapi.testclient import TestClient

from coplaylist.constants import CURRENTLY_PLAYING_URL, StoreKeys
from coplaylist.store.memory import MemoryStore

SONG = {"id": "s1", "name": "Song One", "uri": "spotify:track:s1"}
EMPTY = {"currentSong": {"song": None, "progress_ms": 0, "is_playing": False}, "status": "none"}


def test_get_empty(client: TestClient) -> None:
    resp = client.get("/api/currentSong")
    assert resp.status_code == 200
    assert resp.json() == EMPTY


def test_set_then_get(client: TestClient) -> None:
    resp = client.post("/api/currentSong", json={"song": SONG, "progress_ms": 5000, "is_playing": True})
    assert resp.status_code == 200
    expected = {"currentSong": {"song": SONG, "progress_ms": 5000, "is_playing": True}, "status": "active"}
    assert resp.json() == expected
    assert client.get("/api/currentSong").json() == expected


def test_patch_progress_only(client: TestClient) -> None:
    client.post("/api/currentSong", json={"song": SONG, "progress_ms": 5000})
    resp = client.patch("/api/currentSong", json={"progress_ms": 9000})
    state = resp.json()["currentSong"]
    assert state["progress_ms"] == 9000
    assert state["is_playing"] is True
    assert state["song"] == SONG


def test_patch_without_song_is_ignored(client: TestClient) -> None:
    resp = client.patch("/api/currentSong", json={"progress_ms": 9000, "is_playing": True})
    assert resp.json() == EMPTY


def test_negative_progress_is_400(client: TestClient) -> None:
    resp = client.post("/api/currentSong", json={"song": SONG, "progress_ms": -1})
    assert resp.status_code == 400


def test_delete_clears(client: TestClient) -> None:
    client.post("/api/currentSong", json={"song": SONG})
    resp = client.delete("/api/currentSong")
    assert resp.json() == EMPTY
    assert client.get("/api/currentSong").json() == EMPTY


def test_sync_without_admin_login_is_409(client: TestClient) -> None:
    resp = client.post("/api/currentSong/sync")
    assert resp.status_code == 409


def _store_admin_tokens(memory_store: MemoryStore) -> None:
    expires_at = (datetime.now(UTC) + timedelta(hours=1)).isoformat()
    memory_store._data[StoreKeys.ADMIN_SPOTIFY_TOKENS] = (
        '{"access_token": "admin-access", "refresh_token": null, "expires_at": "%s"}' % expires_at
    )


@respx.mock
def test_sync_copies_spotify_now_playing(client: TestClient, memory_store: MemoryStore) -> None:
    _store_admin_tokens(memory_store)
    route = respx.get(CURRENTLY_PLAYING_URL).mock(
        return_value=httpx.Response(200, json={"item": SONG, "progress_ms": 42000, "is_playing": True})
    )

    resp = client.post("/api/currentSong/sync")
    assert resp.status_code == 200
    assert resp.json()["currentSong"] == {"song": SONG, "progress_ms": 42000, "is_playing": True}
    assert route.calls[0].request.headers["Authorization"] == "Bearer admin-access"


@respx.mock
def test_sync_with_nothing_playing_clears(client: TestClient, memory_store: MemoryStore) -> None:
    _store_admin_tokens(memory_store)
    client.post("/api/currentSong", json={"song": SONG})
    respx.get(CURRENTLY_PLAYING_URL).mock(return_value=httpx.Response(204))

    resp = client.post("/api/currentSong/sync")
    assert resp.json() == EMPTY


@respx.mock
def test_sync_spotify_failure_is_502(client: TestClient, memory_store: MemoryStore) -> None:
    _store_admin_tokens(memory_store)
    respx.get(CURRENTLY_PLAYING_URL).mock(return_value=httpx.Response(403, json={"error": {"message": "nope"}}))

    resp = client.post("/api/currentSong/sync")
    assert resp.status_code == 502
