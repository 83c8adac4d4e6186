"""Pipeline steps: extraction, direct-URL guessing and image processing."""

from __future__ import annotations

from apodbg.services.extractor import extract_image_url, find_image_url, resolve_url
from apodbg.services.guesser import DirectURLGuesser, guess_direct_url
from apodbg.services.image_processor import ImageProcessor, ProcessedImage, target_size


__all__ = [
    "find_image_url",
    "extract_image_url",
    "resolve_url",
    "guess_direct_url",
    "DirectURLGuesser",
    "ImageProcessor",
    "ProcessedImage",
    "target_size",
]
