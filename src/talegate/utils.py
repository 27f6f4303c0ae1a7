"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: utils.py.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def json_text(value: Any) -> str:
    """Serialize arbitrary values into deterministic JSON text."""
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
    except TypeError:
        # Mixed key types cannot be sorted.
        return json.dumps(value, ensure_ascii=False, default=str)


def backoff_delay(attempt: int, base_s: float, jitter_s: float) -> float:
    """Exponential backoff with additive jitter for retry attempt `attempt`."""
    delay = max(0.0, base_s) * (2 ** max(0, attempt))
    if jitter_s > 0:
        delay += random.uniform(0.0, jitter_s)
    return delay
