"""Domain models for APOD Background."""

from apodbg.models.record import CacheRecord


__all__ = [
    "CacheRecord",
]
