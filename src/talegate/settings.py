"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Gateway runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime.contracts import CachePolicy, RetryPolicy

SEVEN_DAYS_S = 7 * 24 * 60 * 60.0


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class GatewaySettings:
    """Explicit settings used by the vault, cache, verifier and pipeline."""

    default_provider: str = "deepseek"

    store_backend: str = "memory"
    store_path: Path = Path(".talegate/store.json")
    redis_url: str | None = None
    store_prefix: str = "talegate"

    cache_capacity: int = 100
    cache_ttl_s: float = SEVEN_DAYS_S

    kdf_iterations: int = 100_000

    max_retries: int = 0
    backoff_base_s: float = 0.5
    backoff_jitter_s: float = 0.15

    probe_max_tokens: int = 8
    lazy_verify: bool = False

    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "info"

    @staticmethod
    def from_env() -> "GatewaySettings":
        """Load settings from environment variables."""
        return GatewaySettings(
            default_provider=os.getenv("TALEGATE_PROVIDER", "deepseek"),
            store_backend=os.getenv("TALEGATE_STORE", "memory"),
            store_path=Path(os.getenv("TALEGATE_STORE_PATH", ".talegate/store.json")),
            redis_url=os.getenv("TALEGATE_REDIS_URL"),
            store_prefix=os.getenv("TALEGATE_STORE_PREFIX", "talegate"),
            cache_capacity=int(os.getenv("TALEGATE_CACHE_CAPACITY", "100")),
            cache_ttl_s=float(os.getenv("TALEGATE_CACHE_TTL_S", str(SEVEN_DAYS_S))),
            kdf_iterations=int(os.getenv("TALEGATE_KDF_ITERATIONS", "100000")),
            max_retries=int(os.getenv("TALEGATE_MAX_RETRIES", "0")),
            backoff_base_s=float(os.getenv("TALEGATE_BACKOFF_BASE_S", "0.5")),
            backoff_jitter_s=float(os.getenv("TALEGATE_BACKOFF_JITTER_S", "0.15")),
            probe_max_tokens=int(os.getenv("TALEGATE_PROBE_MAX_TOKENS", "8")),
            lazy_verify=_env_bool("TALEGATE_LAZY_VERIFY", False),
            host=os.getenv("TALEGATE_HOST", "127.0.0.1"),
            port=int(os.getenv("TALEGATE_PORT", "8765")),
            log_level=os.getenv("TALEGATE_LOG_LEVEL", "info"),
        )

    def retry_policy(self) -> "RetryPolicy":
        from .runtime.contracts import RetryPolicy

        return RetryPolicy(
            max_retries=self.max_retries,
            backoff_base_s=self.backoff_base_s,
            backoff_jitter_s=self.backoff_jitter_s,
        )

    def cache_policy(self) -> "CachePolicy":
        from .runtime.contracts import CachePolicy

        return CachePolicy(capacity=self.cache_capacity, ttl_s=self.cache_ttl_s)
