"""Persistent state: key-value stores and the daily background cache."""

from __future__ import annotations

from apodbg.storage.cache import BackgroundCache
from apodbg.storage.store import JsonFileStore, KeyValueStore, MemoryStore


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "BackgroundCache",
]
