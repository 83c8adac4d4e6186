"""
Direct-URL fallback: today's image at the path the site normally uses.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from io import BytesIO
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from apodbg.config import APOD_IMAGE_PATTERN
from apodbg.exceptions import NetworkError


if TYPE_CHECKING:
    from apodbg.api.http_client import HTTPClient


logger = logging.getLogger("APODBackground")


def guess_direct_url(day: date) -> str:
    """`https://apod.nasa.gov/apod/image/YYMM/YYMMDD.jpg` for the given day."""
    return APOD_IMAGE_PATTERN.format(day=day)


def _verify(data: bytes) -> None:
    with Image.open(BytesIO(data)) as img:
        img.verify()


class DirectURLGuesser:
    def __init__(self, http: HTTPClient):
        self._http = http

    async def probe(self, url: str) -> bool:
        """
        Check that an image exists at `url` by downloading and decoding it.

        Never raises: any failure simply means "not there".
        """
        try:
            data = await self._http.get_bytes(url)
        except NetworkError as exc:
            logger.info(f"Direct URL image not found: {exc}")
            return False
        try:
            await asyncio.to_thread(_verify, data)
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            # PIL's verify() reports a broken file with a SyntaxError
            logger.info(f"Direct URL did not return a usable image: {exc}")
            return False
        logger.info("Direct URL image found")
        return True

    async def guess(self, day: date) -> str | None:
        """Return today's conventional image URL if it exists, None otherwise."""
        url = guess_direct_url(day)
        logger.info(f"Trying direct URL pattern: {url}")
        if await self.probe(url):
            return url
        return None
