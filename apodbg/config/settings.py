from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypedDict

from yarl import URL

from apodbg.config import DEFAULT_CORS_PROXY, JPEG_QUALITY, MAX_DIMENSION, SETTINGS_PATH
from apodbg.utils import json_load, json_save


if TYPE_CHECKING:
    from typing import Any as ParsedArgs  # Avoid circular import


class SettingsFile(TypedDict):
    default_background: str
    cors_proxy: str
    proxy: URL
    connection_quality: int
    retries: int
    downsample: bool
    max_dimension: int
    jpeg_quality: int


default_settings: SettingsFile = {
    "default_background": "",
    "cors_proxy": DEFAULT_CORS_PROXY,
    "proxy": URL(),
    "connection_quality": 1,
    "retries": 1,
    "downsample": True,
    "max_dimension": MAX_DIMENSION,
    "jpeg_quality": JPEG_QUALITY,
}


class Settings:
    # from args
    once: bool
    host: str
    port: int
    # args properties
    debug_http: int
    logging_level: int
    # from settings file
    default_background: str
    cors_proxy: str
    proxy: URL
    connection_quality: int
    retries: int
    downsample: bool
    max_dimension: int
    jpeg_quality: int

    PASSTHROUGH = ("_settings", "_args", "_altered", "_path")

    def __init__(self, args: ParsedArgs, *, path: Path = SETTINGS_PATH):
        self._path: Path = path
        self._settings: SettingsFile = json_load(path, default_settings)
        self._args: ParsedArgs = args
        self._altered: bool = False

    # default logic of reading settings is to check args first, then the settings file
    def __getattr__(self, name: str, /) -> Any:
        if name in self.PASSTHROUGH:
            # passthrough
            return getattr(super(), name)
        elif hasattr(self._args, name):
            return getattr(self._args, name)
        elif name in self._settings:
            return self._settings[name]  # type: ignore[literal-required]
        return getattr(super(), name)

    def __setattr__(self, name: str, value: Any, /) -> None:
        if name in self.PASSTHROUGH:
            # passthrough
            return super().__setattr__(name, value)
        elif name in self._settings:
            self._settings[name] = value  # type: ignore[literal-required]
            self._altered = True
            return
        raise TypeError(f"{name} is missing a custom setter")

    def __delattr__(self, name: str, /) -> None:
        raise RuntimeError("settings can't be deleted")

    def alter(self) -> None:
        self._altered = True

    def save(self, *, force: bool = False) -> None:
        if self._altered or force:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            json_save(self._path, self._settings, sort=True)
            self._altered = False
