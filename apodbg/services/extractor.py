"""
Pulls the picture URL out of the APOD page.

The page has no API and no stable markup, so this is plain pattern matching:
the inline <img> that points into image/ first, then any link to a .jpg.
"""

from __future__ import annotations

import logging
import re

from apodbg.config import APOD_BASE_URL, APOD_ROOT
from apodbg.exceptions import ExtractionMiss


logger = logging.getLogger("APODBackground")

IMG_PATTERN = re.compile(r"""<img\s+[^>]*src=["']((?:[^"']*/)?image/[^"']*)["'][^>]*>""", re.IGNORECASE)
LINK_PATTERN = re.compile(r"""<a\s+[^>]*href=["']([^"']*\.jpg)["'][^>]*>""", re.IGNORECASE)
PATTERNS = (IMG_PATTERN, LINK_PATTERN)


def resolve_url(url: str) -> str:
    """Make a page-relative or root-relative image reference absolute."""
    if url.startswith("/"):
        return APOD_ROOT + url
    elif url.startswith("http"):
        return url
    return APOD_BASE_URL + url


def find_image_url(html: str) -> str | None:
    """Return the absolute image URL found in the page, or None if no pattern matches."""
    for pattern in PATTERNS:
        if (match := pattern.search(html)) and match[1]:
            image_url = resolve_url(match[1])
            logger.info(f"Found APOD image URL: {image_url}")
            return image_url
    return None


def extract_image_url(html: str) -> str:
    """Like find_image_url, but a miss raises ExtractionMiss."""
    if (image_url := find_image_url(html)) is None:
        raise ExtractionMiss("Could not find image in APOD page")
    return image_url
