"""Utility modules for APOD Background."""

from __future__ import annotations

# Async helpers
from .async_helpers import task_wrapper

# Backoff
from .backoff import ExponentialBackoff

# Clock
from .clock import Clock, FrozenClock, SystemClock

# JSON utilities
from .json_utils import (
    SERIALIZE_ENV,
    json_load,
    json_minify,
    json_save,
    merge_json,
)


__all__ = [
    # JSON utilities
    "json_minify",
    "json_load",
    "json_save",
    "merge_json",
    "SERIALIZE_ENV",
    # Async helpers
    "task_wrapper",
    # Backoff
    "ExponentialBackoff",
    # Clock
    "Clock",
    "SystemClock",
    "FrozenClock",
]
