"""
API client modules for talking to the APOD site.

This package provides the shared HTTP client and the page fetcher built on it.
"""

from __future__ import annotations

from apodbg.api.apod_fetcher import ApodFetcher
from apodbg.api.http_client import HTTPClient


__all__ = [
    "HTTPClient",
    "ApodFetcher",
]
