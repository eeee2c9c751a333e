"""Tests for AdminTokenStore and the /api/admin-token endpoints."""

from cryptography.fernet import Fernet
from fastapi.testclient import TestClient

from coplaylist.admin.token import AdminTokenStore
from coplaylist.constants import StoreKeys
from coplaylist.store.memory import MemoryStore

KEY = Fernet.generate_key().decode()


async def test_encrypted_at_rest(memory_store: MemoryStore) -> None:
    tokens = AdminTokenStore(memory_store, encryption_key=KEY)
    assert await tokens.set("BQDsecret") == "BQDsecret"

    stored = await memory_store.get(StoreKeys.ADMIN_TOKEN)
    assert stored != "BQDsecret"
    assert await tokens.get() == "BQDsecret"


async def test_plaintext_without_key(memory_store: MemoryStore) -> None:
    tokens = AdminTokenStore(memory_store)
    await tokens.set("BQDplain")
    assert await memory_store.get(StoreKeys.ADMIN_TOKEN) == "BQDplain"


async def test_wrong_key_reads_as_unset(memory_store: MemoryStore) -> None:
    await AdminTokenStore(memory_store, encryption_key=KEY).set("BQDsecret")
    other = AdminTokenStore(memory_store, encryption_key=Fernet.generate_key().decode())
    assert await other.get() == ""


async def test_clear(memory_store: MemoryStore) -> None:
    tokens = AdminTokenStore(memory_store, encryption_key=KEY)
    await tokens.set("BQDsecret")
    await tokens.clear()
    assert await tokens.get() == ""


def test_admin_token_endpoints(client: TestClient) -> None:
    assert client.get("/api/admin-token").json() == {"token": "", "status": "none"}

    resp = client.post("/api/admin-token", json={"token": "BQDabc"})
    assert resp.json() == {"success": True, "token": "BQDabc"}
    assert client.get("/api/admin-token").json() == {"token": "BQDabc", "status": "active"}

    assert client.delete("/api/admin-token").json() == {"success": True}
    assert client.get("/api/admin-token").json()["status"] == "none"


def test_empty_token_is_400(client: TestClient) -> None:
    assert client.post("/api/admin-token", json={"token": ""}).status_code == 400
