"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/base.py.
"""

from __future__ import annotations

from typing import Protocol


class StoreError(RuntimeError):
    """Raised when store backend resolution fails."""


class KeyValueStore(Protocol):
    """Async string key-value persistence used for config, cache and status."""
    backend_id: str

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...
