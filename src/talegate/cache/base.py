"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..types import JSONObject
from ..utils import sha256_text


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached generation payload with its write time."""
    key: str
    value: JSONObject
    written_at_s: float

    def is_fresh(self, now_s: float, ttl_s: float) -> bool:
        return now_s - self.written_at_s <= ttl_s

    def to_dict(self) -> JSONObject:
        return {"key": self.key, "value": self.value, "written_at_s": self.written_at_s}

    @classmethod
    def from_dict(cls, row: Any) -> "CacheEntry | None":
        if not isinstance(row, dict):
            return None
        key = row.get("key")
        value = row.get("value")
        written = row.get("written_at_s")
        if not isinstance(key, str) or not isinstance(value, dict):
            return None
        if not isinstance(written, (int, float)) or isinstance(written, bool):
            return None
        return cls(key=key, value=value, written_at_s=float(written))


def cache_key(model: str, prompt: str) -> str:
    """Stable key for one (model, exact prompt) pair."""
    return sha256_text(f"{model}\n{prompt}")
