"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import CacheEntry, cache_key
from .response import DEFAULT_CAPACITY, DEFAULT_TTL_S, ResponseCache

__all__ = [
    "CacheEntry",
    "cache_key",
    "ResponseCache",
    "DEFAULT_CAPACITY",
    "DEFAULT_TTL_S",
]
