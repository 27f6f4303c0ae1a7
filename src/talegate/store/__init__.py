"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: store/__init__.py.
"""

from .base import KeyValueStore, StoreError
from .factory import STORE_BACKENDS, create_store
from .file import FileKeyValueStore
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "StoreError",
    "STORE_BACKENDS",
    "create_store",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "RedisKeyValueStore",
]
