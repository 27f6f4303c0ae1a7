"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Per-day counter of live provider calls.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from ..store.base import KeyValueStore
from ..types import UsageStats

logger = logging.getLogger("talegate.usage")

USAGE_STORE_KEY = "call_usage"


def local_day(timestamp: float) -> str:
    return time.strftime("%Y-%m-%d", time.localtime(timestamp))


class CallCounter:
    """
    Counts provider calls as they go out; the daily count restarts when the
    local date changes. Persistence is best-effort.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._clock = clock
        self._stats = UsageStats()

    def snapshot(self) -> UsageStats:
        """Current stats; `today_calls` reads 0 once the recorded day is over."""
        today = local_day(self._clock())
        if self._stats.day and self._stats.day != today:
            return UsageStats(last_call_at=self._stats.last_call_at, day=today, today_calls=0)
        return self._stats

    async def record(self) -> UsageStats:
        now = self._clock()
        today = local_day(now)
        calls = self._stats.today_calls + 1 if self._stats.day == today else 1
        self._stats = UsageStats(last_call_at=now, day=today, today_calls=calls)
        await self._persist()
        return self._stats

    async def restore(self) -> UsageStats:
        if self._store is None:
            return self._stats
        try:
            blob = await self._store.get(USAGE_STORE_KEY)
        except Exception:
            logger.warning("Failed to read persisted call usage", exc_info=True)
            return self._stats
        if blob:
            try:
                self._stats = UsageStats.from_dict(json.loads(blob))
            except json.JSONDecodeError:
                logger.warning("Persisted call usage is corrupt; ignoring it")
        return self._stats

    async def _persist(self) -> None:
        if self._store is None:
            return
        try:
            await self._store.set(USAGE_STORE_KEY, json.dumps(self._stats.to_dict()))
        except Exception:
            logger.warning("Failed to persist call usage", exc_info=True)
