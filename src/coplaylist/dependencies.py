"""Shared FastAPI dependencies."""

from fastapi import Request

from coplaylist.store.base import KeyValueStore


def get_store(request: Request) -> KeyValueStore:
    """Return the process-wide key-value store created during app lifespan."""
    store: KeyValueStore = request.app.state.store
    return store
