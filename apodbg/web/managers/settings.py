"""Settings manager for application configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from yarl import URL


if TYPE_CHECKING:
    from apodbg.config.settings import Settings
    from apodbg.web.managers.broadcaster import WebSocketBroadcaster


logger = logging.getLogger("APODBackground")


class SettingsManager:
    """Manages application settings in the web interface.

    Provides access to and modification of the default background, the relay
    and proxy used for fetching, and the image processing options.
    """

    def __init__(
        self,
        broadcaster: WebSocketBroadcaster,
        settings: Settings,
        on_change: Callable[[], None] | None = None,
    ):
        self._broadcaster = broadcaster
        self._settings = settings
        self._on_change = on_change

    def set_on_change(self, on_change: Callable[[], None] | None) -> None:
        self._on_change = on_change

    def get_settings(self) -> dict[str, Any]:
        """Get current settings for display."""
        return {
            "default_background": self._settings.default_background,
            "cors_proxy": self._settings.cors_proxy,
            "proxy": str(self._settings.proxy),
            "connection_quality": self._settings.connection_quality,
            "retries": self._settings.retries,
            "downsample": self._settings.downsample,
            "max_dimension": self._settings.max_dimension,
            "jpeg_quality": self._settings.jpeg_quality,
        }

    def update_settings(self, settings_data: dict[str, Any]):
        """Update settings from user input.

        Values are assumed to be type-checked already (the API model does that);
        out of range numbers are clamped here.

        Args:
            settings_data: Dictionary of settings to update
        """
        should_trigger_update = False

        if "default_background" in settings_data:
            self._settings.default_background = (settings_data["default_background"] or "").strip()
            logger.info(f"Setting changed: default_background = {self._settings.default_background!r}")

        if "cors_proxy" in settings_data:
            self._settings.cors_proxy = (settings_data["cors_proxy"] or "").strip()
            logger.info(f"Setting changed: cors_proxy = {self._settings.cors_proxy!r}")

        if "proxy" in settings_data:
            proxy_str = (settings_data["proxy"] or "").strip()
            if proxy_str:
                if self._settings.proxy != URL(proxy_str):
                    self._settings.proxy = URL(proxy_str)
                    logger.info(f"Proxy set to: {proxy_str}")
            elif self._settings.proxy != URL():
                self._settings.proxy = URL()
                logger.info("Proxy cleared")

        if "connection_quality" in settings_data:
            self._settings.connection_quality = min(6, max(1, settings_data["connection_quality"]))
            logger.info(f"Setting changed: connection_quality = {self._settings.connection_quality}")

        if "retries" in settings_data:
            self._settings.retries = min(5, max(0, settings_data["retries"]))
            logger.info(f"Setting changed: retries = {self._settings.retries}")

        if "downsample" in settings_data:
            self._settings.downsample = bool(settings_data["downsample"])
            logger.info(f"Setting changed: downsample = {self._settings.downsample}")

        if "max_dimension" in settings_data:
            self._settings.max_dimension = max(16, settings_data["max_dimension"])
            logger.info(f"Setting changed: max_dimension = {self._settings.max_dimension}")
            should_trigger_update = True

        if "jpeg_quality" in settings_data:
            self._settings.jpeg_quality = min(95, max(1, settings_data["jpeg_quality"]))
            logger.info(f"Setting changed: jpeg_quality = {self._settings.jpeg_quality}")
            should_trigger_update = True

        self._settings.alter()
        # Persist settings to disk immediately
        self._settings.save()
        if self._broadcaster.connected:
            self._broadcaster.schedule("settings_updated", self.get_settings())

        if should_trigger_update and self._on_change:
            self._on_change()
