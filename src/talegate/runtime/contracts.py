"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for provider calls and response caching.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Retry semantics for one generation call.

    `max_retries=0` keeps single-shot behaviour: one failure goes straight to
    fallback content.
    """

    max_retries: int = 0
    backoff_base_s: float = 0.5
    backoff_jitter_s: float = 0.15


@dataclass(frozen=True, slots=True)
class CachePolicy:
    """Response cache bounds."""

    capacity: int = 100
    ttl_s: float = 7 * 24 * 60 * 60.0
