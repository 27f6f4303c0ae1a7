"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/factory.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import KeyValueStore, StoreError
from .file import FileKeyValueStore
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore

if TYPE_CHECKING:
    from ..settings import GatewaySettings

STORE_BACKENDS = ("memory", "file", "redis")


def create_store(
    backend: str | KeyValueStore | None = None,
    settings: "GatewaySettings | None" = None,
) -> KeyValueStore:
    """Build a fresh store from an id, or pass an instance through."""
    if backend is not None and not isinstance(backend, str):
        return backend

    if settings is None:
        from ..settings import GatewaySettings

        settings = GatewaySettings()

    key = (backend or settings.store_backend).strip().lower()
    if key in ("memory", "inmemory"):
        return InMemoryKeyValueStore()
    if key == "file":
        return FileKeyValueStore(settings.store_path)
    if key == "redis":
        if not settings.redis_url:
            raise StoreError("Redis store requires TALEGATE_REDIS_URL")
        return RedisKeyValueStore.from_url(settings.redis_url, prefix=settings.store_prefix)
    raise StoreError(f"Unknown store backend '{backend or settings.store_backend}'")
