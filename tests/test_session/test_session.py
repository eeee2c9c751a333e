"""Tests for session flags and the /api/session endpoints."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from coplaylist.constants import StoreKeys
from coplaylist.session.service import SessionFlags
from coplaylist.store.exceptions import StoreError
from coplaylist.store.memory import MemoryStore


async def test_flags_default_to_inactive_and_unset(memory_store: MemoryStore) -> None:
    flags = SessionFlags(memory_store)
    assert await flags.is_active() is False
    assert await flags.get_type() is None


async def test_flags_are_independent(memory_store: MemoryStore) -> None:
    flags = SessionFlags(memory_store)
    await flags.set_type("party")
    await flags.set_active(True)
    await flags.set_active(False)
    assert await flags.get_type() == "party"

    await flags.clear_type()
    await flags.set_active(True)
    assert await flags.is_active() is True
    assert await flags.get_type() is None


async def test_string_true_counts_as_active(memory_store: MemoryStore) -> None:
    await memory_store.set(StoreKeys.SESSION_STATUS, "true")
    assert await SessionFlags(memory_store).is_active() is True


async def test_unreachable_store_reads_as_inactive(memory_store: MemoryStore) -> None:
    memory_store.get = AsyncMock(side_effect=StoreError("get", "connection refused"))  # type: ignore[method-assign]
    flags = SessionFlags(memory_store)
    assert await flags.is_active() is False
    assert await flags.get_type() is None


def test_session_status_endpoints(client: TestClient) -> None:
    assert client.get("/api/session").json() == {"session": "inactive"}

    resp = client.post("/api/session", json={"session": "active"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "session": "active"}
    assert client.get("/api/session").json() == {"session": "active"}

    client.post("/api/session", json={"session": "inactive"})
    assert client.get("/api/session").json() == {"session": "inactive"}


def test_invalid_session_value_is_400(client: TestClient) -> None:
    resp = client.post("/api/session", json={"session": "paused"})
    assert resp.status_code == 400


def test_session_type_endpoints(client: TestClient) -> None:
    assert client.get("/api/session/type").json() == {"sessionType": "none"}

    resp = client.post("/api/session/type", json={"sessionType": "party"})
    assert resp.json() == {"success": True, "message": "Session type updated"}
    assert client.get("/api/session/type").json() == {"sessionType": "party"}

    resp = client.delete("/api/session/type")
    assert resp.json() == {"success": True, "message": "Session type cleared successfully"}
    assert client.get("/api/session/type").json() == {"sessionType": "none"}


def test_empty_session_type_is_400(client: TestClient) -> None:
    resp = client.post("/api/session/type", json={"sessionType": ""})
    assert resp.status_code == 400
