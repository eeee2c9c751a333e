"""Tests for the action log export script."""

import csv
import io
import json
from pathlib import Path

import pytest

from coplaylist.actions.schemas import ActionLogEntry
from coplaylist.actions.service import ActionLogger
from coplaylist.scripts import logs
from coplaylist.store.memory import MemoryStore

ENTRIES = [
    ActionLogEntry(timestamp="2024-05-01T12:00:00+00:00", user_id="alice", action="vote", metadata={"voteType": "up"}),
    ActionLogEntry(timestamp="2024-05-01T12:01:00+00:00", user_id="bob", action="change_view"),
]


def test_render_json() -> None:
    rows = json.loads(logs.render_logs(ENTRIES, "json"))
    assert rows[0] == {
        "timestamp": "2024-05-01T12:00:00+00:00",
        "userId": "alice",
        "action": "vote",
        "metadata": {"voteType": "up"},
    }


def test_render_csv() -> None:
    rows = list(csv.reader(io.StringIO(logs.render_logs(ENTRIES, "csv"))))
    assert rows[0] == ["timestamp", "userId", "action", "metadata"]
    assert rows[1] == ["2024-05-01T12:00:00+00:00", "alice", "vote", '{"voteType": "up"}']
    assert rows[2][3] == "{}"


def test_parser() -> None:
    args = logs.build_parser().parse_args(["export", "--user-id", "alice", "--format", "csv"])
    assert args.command == "export"
    assert args.user_id == "alice"
    assert args.output_format == "csv"
    assert args.limit == 1000

    with pytest.raises(SystemExit):
        logs.build_parser().parse_args(["export", "--format", "xml"])


async def test_export_writes_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = MemoryStore()
    await ActionLogger(store).log_action("alice", "vote", {"voteType": "increment"})
    monkeypatch.setattr(logs, "create_store", lambda settings: store)

    path = await logs.export_logs("alice", "json", tmp_path / "out.json", limit=10)
    rows = json.loads(path.read_text(encoding="utf-8"))
    assert [row["userId"] for row in rows] == ["alice"]


def test_clear_aborts_without_confirmation(monkeypatch: pytest.MonkeyPatch) -> None:
    store = MemoryStore()
    monkeypatch.setattr(logs, "create_store", lambda settings: store)
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert logs.main(["clear"]) == 1


def test_clear_with_yes(monkeypatch: pytest.MonkeyPatch) -> None:
    store = MemoryStore()
    store._data["user_action:all"] = ["x"]
    monkeypatch.setattr(logs, "create_store", lambda settings: store)
    assert logs.main(["clear", "--yes"]) == 0
    assert store._data == {}
