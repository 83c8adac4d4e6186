"""Configuration package for APOD Background."""

from __future__ import annotations

# Re-export all public symbols for convenience
from .constants import (
    APOD_BASE_URL,
    APOD_IMAGE_PATTERN,
    APOD_PAGE_URL,
    APOD_ROOT,
    CACHE_KEY,
    CALL,
    DEFAULT_CORS_PROXY,
    FALLBACK_BACKGROUND,
    FILE_FORMATTER,
    JPEG_QUALITY,
    LAST_VISIT_KEY,
    LOGGING_LEVELS,
    MAX_DIMENSION,
    MAX_RETRY_DELAY,
    USER_AGENT,
    JsonType,
    Stage,
)
from .paths import (
    DATA_DIR,
    LOGS_DIR,
    SETTINGS_PATH,
    STORAGE_PATH,
    WEB_DIR,
    ensure_data_dir,
)


__all__ = [
    # constants.py
    "CALL",
    "FILE_FORMATTER",
    "LOGGING_LEVELS",
    "JsonType",
    "Stage",
    "APOD_ROOT",
    "APOD_BASE_URL",
    "APOD_PAGE_URL",
    "APOD_IMAGE_PATTERN",
    "DEFAULT_CORS_PROXY",
    "FALLBACK_BACKGROUND",
    "CACHE_KEY",
    "LAST_VISIT_KEY",
    "MAX_DIMENSION",
    "JPEG_QUALITY",
    "USER_AGENT",
    "MAX_RETRY_DELAY",
    # paths.py
    "DATA_DIR",
    "LOGS_DIR",
    "SETTINGS_PATH",
    "STORAGE_PATH",
    "WEB_DIR",
    "ensure_data_dir",
]
