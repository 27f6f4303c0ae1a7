"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/memory.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .base import KeyValueStore


@dataclass(slots=True)
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store suitable for development/test workloads."""

    backend_id: str = "memory"
    _rows: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    async def get(self, key: str) -> str | None:
        return self._rows.get(key)

    async def set(self, key: str, value: str) -> None:
        self._rows[key] = value

    async def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._rows)
