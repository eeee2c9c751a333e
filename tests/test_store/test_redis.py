"""Tests for RedisStore against a mocked redis.asyncio client."""

import json
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockError

from coplaylist.store.exceptions import StoreError
from coplaylist.store.redis_store import RedisStore


def _mock_redis() -> AsyncMock:
    client = AsyncMock()
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=True)
    lock.release = AsyncMock()
    client.lock = MagicMock(return_value=lock)
    return client


async def test_get_decodes_json() -> None:
    client = _mock_redis()
    client.get.return_value = json.dumps([{"votes": 2}])
    store = RedisStore(client)
    assert await store.get("spotify_leaderboard") == [{"votes": 2}]
    client.get.assert_awaited_once_with("spotify_leaderboard")


async def test_get_returns_non_json_string_as_is() -> None:
    client = _mock_redis()
    client.get.return_value = "plain-token"
    assert await RedisStore(client).get("admin_token") == "plain-token"


async def test_set_encodes_json_and_passes_expiry() -> None:
    client = _mock_redis()
    await RedisStore(client).set("pkce_verifier:abc", {"verifier": "v"}, ex=300)
    client.set.assert_awaited_once_with("pkce_verifier:abc", json.dumps({"verifier": "v"}), ex=300)


async def test_delete_without_keys_skips_redis() -> None:
    client = _mock_redis()
    assert await RedisStore(client).delete() == 0
    client.delete.assert_not_awaited()


async def test_redis_errors_become_store_errors() -> None:
    client = _mock_redis()
    client.get.side_effect = RedisConnectionError("connection refused")
    with pytest.raises(StoreError) as exc_info:
        await RedisStore(client).get("k")
    assert exc_info.value.operation == "get"


async def test_keys_uses_scan_iter() -> None:
    async def _scan(match: str) -> AsyncIterator[str]:
        for key in ("user_action:1", "user_action:all"):
            yield key

    client = _mock_redis()
    client.scan_iter = MagicMock(side_effect=_scan)
    assert await RedisStore(client).keys("user_action:*") == ["user_action:1", "user_action:all"]
    client.scan_iter.assert_called_once_with(match="user_action:*")


async def test_lock_acquires_and_releases() -> None:
    client = _mock_redis()
    store = RedisStore(client, lock_timeout=2.0)
    async with store.lock("lock:leaderboard"):
        pass
    client.lock.assert_called_once_with("lock:leaderboard", timeout=2.0, blocking_timeout=2.0)
    client.lock.return_value.release.assert_awaited_once()


async def test_lock_timeout_raises_store_error() -> None:
    client = _mock_redis()
    client.lock.return_value.acquire.return_value = False
    with pytest.raises(StoreError):
        async with RedisStore(client).lock("lock:leaderboard"):
            pytest.fail("body must not run without the lock")


async def test_lock_release_error_is_logged_not_raised() -> None:
    client = _mock_redis()
    client.lock.return_value.release.side_effect = LockError("expired")
    async with RedisStore(client).lock("lock:leaderboard"):
        pass


async def test_ping_failure_returns_false() -> None:
    client = _mock_redis()
    client.ping.side_effect = RedisConnectionError("down")
    assert await RedisStore(client).ping() is False
