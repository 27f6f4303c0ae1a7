"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bounded, expiring response cache.
"""

from __future__ import annotations

import copy
import json
import logging
import time
from collections.abc import Callable

from ..store.base import KeyValueStore
from ..types import JSONObject
from .base import CacheEntry

logger = logging.getLogger("talegate.cache")

DEFAULT_CAPACITY = 100
DEFAULT_TTL_S = 7 * 24 * 60 * 60.0
STORE_KEY = "response_cache"


class ResponseCache:
    """
    Keeps at most `capacity` entries, each valid for `ttl_s` seconds.

    Expired entries read as misses but stay in memory until a write pushes
    the cache over capacity; eviction then drops expired entries first and
    keeps the most recently written ones. Persistence to the store is
    best-effort: failures are logged and swallowed.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_CAPACITY,
        ttl_s: float = DEFAULT_TTL_S,
        store: KeyValueStore | None = None,
        clock: Callable[[], float] = time.time,
        store_key: str = STORE_KEY,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self.ttl_s = ttl_s
        self._store = store
        self._clock = clock
        self._store_key = store_key
        self._rows: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def get(self, key: str) -> JSONObject | None:
        """Fresh copy of the value for `key`, or None."""
        row = self._rows.get(key)
        if row is None or not row.is_fresh(self._clock(), self.ttl_s):
            return None
        return copy.deepcopy(row.value)

    def entries(self) -> list[CacheEntry]:
        return sorted(self._rows.values(), key=lambda row: row.written_at_s)

    async def put(self, key: str, value: JSONObject) -> None:
        """Insert or overwrite `key`, evict past capacity, then persist."""
        self._rows.pop(key, None)
        self._rows[key] = CacheEntry(key=key, value=copy.deepcopy(value), written_at_s=self._clock())
        if len(self._rows) > self.capacity:
            self._evict()
        await self._persist()

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, row in self._rows.items() if not row.is_fresh(now, self.ttl_s)]:
            del self._rows[key]
        if len(self._rows) <= self.capacity:
            return
        # Ties on write time fall back to write order.
        rows = list(self._rows.values())
        order = sorted(range(len(rows)), key=lambda i: (rows[i].written_at_s, i))
        keep = order[-self.capacity :]
        self._rows = {rows[i].key: rows[i] for i in sorted(keep)}
        logger.debug("Evicted cache entries down to %s", self.capacity)

    async def clear(self) -> None:
        self._rows.clear()
        if self._store is None:
            return
        try:
            await self._store.delete(self._store_key)
        except Exception:
            logger.warning("Failed to clear persisted response cache", exc_info=True)

    async def load(self) -> int:
        """Replace contents with the persisted entries; returns the count loaded."""
        if self._store is None:
            return 0
        try:
            blob = await self._store.get(self._store_key)
        except Exception:
            logger.warning("Failed to read persisted response cache", exc_info=True)
            return 0
        if not blob:
            return 0
        try:
            rows = json.loads(blob)
        except json.JSONDecodeError:
            logger.warning("Persisted response cache is corrupt; ignoring it")
            return 0
        if not isinstance(rows, list):
            return 0
        loaded = [entry for entry in map(CacheEntry.from_dict, rows) if entry is not None]
        loaded.sort(key=lambda row: row.written_at_s)
        self._rows = {row.key: row for row in loaded[-self.capacity :]}
        return len(self._rows)

    async def _persist(self) -> None:
        if self._store is None:
            return
        try:
            payload = json.dumps([row.to_dict() for row in self.entries()], ensure_ascii=False)
            await self._store.set(self._store_key, payload)
        except Exception:
            logger.warning("Failed to persist response cache", exc_info=True)
