"""Main web page manager coordinating all UI components."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from apodbg.web.managers.background import BackgroundManager
from apodbg.web.managers.broadcaster import WebSocketBroadcaster
from apodbg.web.managers.settings import SettingsManager
from apodbg.web.managers.status import StatusManager


if TYPE_CHECKING:
    from socketio import AsyncServer

    from apodbg.config.settings import Settings


logger = logging.getLogger("APODBackground")


class WebPageManager:
    """Coordinates the managers behind the served page.

    Every manager shares one broadcaster, so wiring up Socket.IO once
    connects all of them to the open pages.
    """

    def __init__(self, settings: Settings):
        self._broadcaster = WebSocketBroadcaster()

        self.status = StatusManager(self._broadcaster)
        self.background = BackgroundManager(self._broadcaster)
        self.settings = SettingsManager(self._broadcaster, settings)

        logger.info("Web page manager initialized")

    def set_socketio(self, sio: AsyncServer):
        """Connect the broadcaster to the Socket.IO server.

        Args:
            sio: The Socket.IO AsyncServer instance
        """
        self._broadcaster.set_socketio(sio)

    def get_state(self) -> dict[str, Any]:
        """Snapshot sent to a page when it connects."""
        return {
            "status": self.status.get(),
            "background": self.background.get(),
            "settings": self.settings.get_settings(),
        }
