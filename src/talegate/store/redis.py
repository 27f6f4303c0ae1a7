"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/redis.py.
"""

from __future__ import annotations

from typing import Any


class RedisKeyValueStore:
    """Redis-backed store for deployments sharing state across processes."""

    backend_id = "redis"

    def __init__(self, redis_client: Any, *, prefix: str = "talegate") -> None:
        self._redis = redis_client
        self._prefix = prefix.rstrip(":")

    @classmethod
    def from_url(cls, url: str, *, prefix: str = "talegate") -> "RedisKeyValueStore":
        try:
            import redis.asyncio as redis
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "Redis store backend requires `redis` to be installed."
            ) from exc
        return cls(redis.Redis.from_url(url, decode_responses=True), prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def get(self, key: str) -> str | None:
        blob = await self._redis.get(self._key(key))
        if blob is None:
            return None
        if isinstance(blob, bytes):
            return blob.decode("utf-8")
        return str(blob)

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(self._key(key), value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))
