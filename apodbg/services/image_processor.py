"""
Downloads the picture and re-encodes it small enough to store.

APOD images are often several thousand pixels across; the stored copy is capped
at a maximum dimension and saved as a JPEG data URL.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from io import BytesIO
from typing import TYPE_CHECKING, NamedTuple

from PIL import Image, UnidentifiedImageError

from apodbg.config import JPEG_QUALITY, MAX_DIMENSION
from apodbg.exceptions import ImageLoadError, NetworkError, SerializationError


if TYPE_CHECKING:
    from apodbg.api.http_client import HTTPClient


logger = logging.getLogger("APODBackground")


class ProcessedImage(NamedTuple):
    data_url: str
    width: int
    height: int


def target_size(width: int, height: int, max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """
    Size after capping the longest side at `max_dimension`, keeping the aspect ratio.
    Images already within the cap keep their size.
    """
    if width > height and width > max_dimension:
        height = max(1, round(height * (max_dimension / width)))
        width = max_dimension
    elif height > max_dimension:
        width = max(1, round(width * (max_dimension / height)))
        height = max_dimension
    return width, height


def _decode(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


class ImageProcessor:
    def __init__(
        self,
        http: HTTPClient,
        *,
        max_dimension: int = MAX_DIMENSION,
        quality: int = JPEG_QUALITY,
    ):
        self._http = http
        self.max_dimension = max_dimension
        self.quality = quality

    async def load(self, url: str) -> Image.Image:
        """
        Download and decode the image at `url`.

        Raises ImageLoadError if it can't be fetched or isn't an image.
        """
        try:
            data = await self._http.get_bytes(url)
        except NetworkError as exc:
            raise ImageLoadError(url, str(exc)) from exc
        try:
            return await asyncio.to_thread(_decode, data)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageLoadError(url, str(exc)) from exc

    def _encode(self, img: Image.Image) -> ProcessedImage:
        width, height = target_size(img.width, img.height, self.max_dimension)
        if (width, height) != img.size:
            logger.debug(f"Resizing image from {img.width}x{img.height} to {width}x{height}")
            img = img.resize((width, height), Image.Resampling.LANCZOS)
        if img.mode != "RGB":
            logger.debug(f"Converting image from mode {img.mode} to RGB")
            img = img.convert("RGB")
        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=self.quality)
        payload = base64.b64encode(buffer.getvalue()).decode("ascii")
        return ProcessedImage(f"data:image/jpeg;base64,{payload}", width, height)

    async def encode(self, img: Image.Image) -> ProcessedImage:
        """
        Downsample and serialize a loaded image to a JPEG data URL.

        Raises SerializationError if re-encoding fails.
        """
        try:
            return await asyncio.to_thread(self._encode, img)
        except (OSError, ValueError, KeyError) as exc:
            raise SerializationError(f"Error creating data URL: {exc}") from exc

    async def process(self, url: str) -> ProcessedImage:
        """Load then encode. Raises ImageLoadError or SerializationError."""
        img = await self.load(url)
        logger.info("Image loaded, processing...")
        return await self.encode(img)
