"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Single-document JSON file store.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger("talegate.store")


class FileKeyValueStore:
    """
    Keeps every key in one JSON object on disk.

    Writes go through a temp file and `os.replace`, so a crash mid-write
    leaves the previous document intact. An unreadable document is treated
    as empty.
    """

    backend_id = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            row = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Store document %s is not valid JSON; starting empty", self.path)
            return {}
        if not isinstance(row, dict):
            return {}
        return {str(k): v for k, v in row.items() if isinstance(v, str)}

    def _write(self, rows: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            rows = await asyncio.to_thread(self._read)
        return rows.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            rows = await asyncio.to_thread(self._read)
            rows[key] = value
            await asyncio.to_thread(self._write, rows)

    async def delete(self, key: str) -> None:
        async with self._lock:
            rows = await asyncio.to_thread(self._read)
            if rows.pop(key, None) is not None:
                await asyncio.to_thread(self._write, rows)
