"""Tests for the /api/leaderboard endpoints."""

from fastapi.testclient import TestClient

from coplaylist.constants import StoreKeys
from coplaylist.store.memory import MemoryStore


def _track(track_id: str, **extra: object) -> dict[str, object]:
    return {"id": track_id, "name": f"Song {track_id}", "uri": f"spotify:track:{track_id}", **extra}


def test_get_empty_leaderboard(client: TestClient) -> None:
    resp = client.get("/api/leaderboard")
    assert resp.status_code == 200
    assert resp.json() == {"list": [], "initialized": False}


def test_initialize(client: TestClient) -> None:
    resp = client.post("/api/leaderboard")
    assert resp.status_code == 200
    assert resp.json()["initialized"] is True


def test_add_track_wrapped_and_bare(client: TestClient) -> None:
    resp = client.post("/api/leaderboard/add", json={"track": _track("a1")})
    assert resp.status_code == 200
    assert resp.json()["list"] == [{"track": _track("a1"), "votes": 1}]

    resp = client.post("/api/leaderboard/add", json=_track("b2"))
    assert [entry["track"]["id"] for entry in resp.json()["list"]] == ["a1", "b2"]


def test_add_preserves_unknown_track_fields(client: TestClient) -> None:
    track = _track("a1", preview_url="https://p.scdn.co/x", is_local=False)
    resp = client.post("/api/leaderboard/add", json={"track": track})
    assert resp.json()["list"][0]["track"] == track


def test_add_without_track_id_is_400(client: TestClient) -> None:
    resp = client.post("/api/leaderboard/add", json={"track": {"name": "no id"}})
    assert resp.status_code == 400


def test_add_with_non_object_body_is_400(client: TestClient) -> None:
    resp = client.post("/api/leaderboard/add", json=["not", "an", "object"])
    assert resp.status_code == 400


def test_vote_flow_with_auto_sort(client: TestClient) -> None:
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    client.post("/api/leaderboard/add", json={"track": _track("b2")})

    resp = client.post("/api/leaderboard/vote", json={"id": "b2", "action": "increment"})
    assert resp.status_code == 200
    assert [(e["track"]["id"], e["votes"]) for e in resp.json()["list"]] == [("b2", 2), ("a1", 1)]

    resp = client.post("/api/leaderboard/vote", json={"id": "b2", "action": "decrement"})
    assert [(e["track"]["id"], e["votes"]) for e in resp.json()["list"]] == [("b2", 1), ("a1", 1)]


def test_vote_invalid_action_is_400(client: TestClient) -> None:
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    resp = client.post("/api/leaderboard/vote", json={"id": "a1", "action": "upvote"})
    assert resp.status_code == 400
    assert "upvote" in resp.json()["detail"]


def test_vote_unknown_id_with_invalid_action_is_400(client: TestClient) -> None:
    resp = client.post("/api/leaderboard/vote", json={"id": "ghost", "action": "sideways"})
    assert resp.status_code == 400


def test_vote_unknown_id_leaves_status_unchanged(client: TestClient) -> None:
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    before = client.get("/api/leaderboard").json()
    resp = client.post("/api/leaderboard/vote", json={"id": "ghost", "action": "increment"})
    assert resp.status_code == 200
    assert resp.json() == before


def test_vote_missing_fields_is_400(client: TestClient) -> None:
    resp = client.post("/api/leaderboard/vote", json={"id": "a1"})
    assert resp.status_code == 400


def test_add_votes(client: TestClient) -> None:
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    resp = client.post("/api/leaderboard/vote/add", json={"trackId": "a1", "votes": 5})
    assert resp.json()["list"][0]["votes"] == 6


def test_remove_and_remove_unknown(client: TestClient) -> None:
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    resp = client.post("/api/leaderboard/remove", json={"id": "ghost"})
    assert len(resp.json()["list"]) == 1

    resp = client.post("/api/leaderboard/remove", json={"id": "a1"})
    assert resp.json()["list"] == []


def test_reset(client: TestClient) -> None:
    client.post("/api/leaderboard")
    client.post("/api/leaderboard/add", json={"track": _track("a1")})
    resp = client.post("/api/leaderboard/reset")
    assert resp.json() == {"list": [], "initialized": False}
    assert client.get("/api/leaderboard").json() == {"list": [], "initialized": False}


def test_corrupt_storage_reads_as_empty(client: TestClient, memory_store: MemoryStore) -> None:
    memory_store._data[StoreKeys.LEADERBOARD] = '"not a list"'
    resp = client.get("/api/leaderboard")
    assert resp.status_code == 200
    assert resp.json() == {"list": [], "initialized": False}


def test_mutation_on_corrupt_storage_is_503(client: TestClient, memory_store: MemoryStore) -> None:
    memory_store._data[StoreKeys.LEADERBOARD] = '"not a list"'
    resp = client.post("/api/leaderboard/add", json={"track": _track("a1")})
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Storage backend unavailable"}
