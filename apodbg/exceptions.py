"""Exception hierarchy for the background loader.

Every error raised by a pipeline step is recovered inside
:class:`apodbg.core.loader.BackgroundLoader`; none of them reach the page.
"""

from __future__ import annotations


class ApodError(Exception):
    """Base class for all APOD Background errors."""


class NetworkError(ApodError):
    """The relay or the site could not be reached, or answered with a non-OK status."""

    def __init__(self, url: str, *, status: int | None = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"HTTP error {status} for {url}"
        else:
            message = f"Request to {url} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ExtractionMiss(ApodError):
    """Neither image pattern matched the page HTML."""


class ImageLoadError(ApodError):
    """An image could not be downloaded or decoded."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        super().__init__(f"Could not load image {url}" + (f": {reason}" if reason else ""))


class SerializationError(ApodError):
    """Re-encoding a loaded image into an embeddable form failed."""
