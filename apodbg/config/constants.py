"""Core constants, enums, and type definitions for APOD Background."""

from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Any


# Logging special levels
CALL: int = logging.INFO - 1
logging.addLevelName(CALL, "CALL")

# Logging configuration
LOGGING_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: CALL,
    4: logging.DEBUG,
}
FILE_FORMATTER = logging.Formatter(
    "{asctime}.{msecs:03.0f}:\t{levelname:>7}:\t{filename}:{lineno}:\t{message}",
    style="{",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Type aliases
JsonType = dict[str, Any]

# APOD site layout
APOD_ROOT = "https://apod.nasa.gov"
APOD_BASE_URL = f"{APOD_ROOT}/apod/"
APOD_PAGE_URL = f"{APOD_BASE_URL}astropix.html"
# /apod/image/YYMM/YYMMDD.jpg
APOD_IMAGE_PATTERN = APOD_BASE_URL + "image/{day:%y%m}/{day:%y%m%d}.jpg"

# Third-party relay that re-serves the page with permissive CORS headers
DEFAULT_CORS_PROXY = "https://corsproxy.io/?"

# Last resort when nothing else yields an image
FALLBACK_BACKGROUND = "https://apod.nasa.gov/apod/image/2409/Bat_Taivalnaa_4200.jpg"

# Storage keys
CACHE_KEY = "apod_cache"
LAST_VISIT_KEY = "apod_last_visit"

# Image processing
MAX_DIMENSION = 1200
JPEG_QUALITY = 85

# Networking
USER_AGENT = "APODBackground/1.0 (+https://apod.nasa.gov)"
MAX_RETRY_DELAY = timedelta(seconds=10)


class Stage(Enum):
    """Loader pipeline stages, in the order a full pass visits them."""

    START = "start"
    CHECK_CACHE = "check_cache"
    USE_CACHE = "use_cache"
    FETCH = "fetch"
    GUESS_DIRECT_URL = "guess_direct_url"
    PROCESS = "process"
    CACHE = "cache"
    FALLBACK = "fallback"
    RENDER = "render"
