"""Path-related configuration and environment detection."""

from __future__ import annotations

import os
from pathlib import Path


# Environment detection
IS_DOCKER = os.getenv("DOCKER_ENV") == "1" or os.path.exists("/.dockerenv")

# Base Paths - environment-specific resolution
if (data_dir_env := os.getenv("APODBG_DATA_DIR")):
    WORKING_DIR = Path.cwd()
    DATA_DIR = Path(data_dir_env)
elif IS_DOCKER:
    # Docker environment: use fixed paths
    WORKING_DIR = Path("/app")
    DATA_DIR = Path("/app/data")
else:
    WORKING_DIR = Path.cwd()
    DATA_DIR = Path(WORKING_DIR, "data")

# Web files live next to the package, not in the data dir
WEB_DIR = Path(__file__).resolve().parent.parent.parent / "web"

# Persistent storage paths - use DATA_DIR for Docker compatibility
LOGS_DIR = Path(WORKING_DIR, "logs")
SETTINGS_PATH = Path(DATA_DIR, "settings.json")
STORAGE_PATH = Path(DATA_DIR, "storage.json")


def ensure_data_dir() -> None:
    """Create the data directory if it does not exist yet."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
