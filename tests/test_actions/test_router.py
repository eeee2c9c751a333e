"""Tests for POST /api/log-action."""

from fastapi.testclient import TestClient

from coplaylist.store.memory import MemoryStore


def test_log_action(client: TestClient, memory_store: MemoryStore) -> None:
    resp = client.post(
        "/api/log-action",
        json={"userId": "alice", "action": "change_view", "metadata": {"viewName": "genres"}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert memory_store._data["user_action:user:alice"]


def test_log_action_without_metadata(client: TestClient) -> None:
    resp = client.post("/api/log-action", json={"userId": "alice", "action": "open_menu"})
    assert resp.json() == {"success": True}


def test_log_action_missing_user_is_400(client: TestClient) -> None:
    resp = client.post("/api/log-action", json={"action": "vote"})
    assert resp.status_code == 400


def test_log_action_store_failure_is_500(client: TestClient, memory_store: MemoryStore) -> None:
    memory_store._data["user_action:all"] = '"corrupt"'
    resp = client.post("/api/log-action", json={"userId": "alice", "action": "vote"})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Failed to log action"}
