"""Core pipeline: the background loader."""

from apodbg.core.loader import BackgroundLoader


__all__ = [
    "BackgroundLoader",
]
