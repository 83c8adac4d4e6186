"""Status manager publishing the loader's current pipeline stage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apodbg.config import CALL, Stage


if TYPE_CHECKING:
    from apodbg.web.managers.broadcaster import WebSocketBroadcaster


logger = logging.getLogger("APODBackground")


class StatusManager:
    """Tracks and broadcasts which stage the background loader is in.

    Stages are shown in the page's status line, e.g. "fetch" while the APOD
    page is being downloaded, "render" once a background has been applied.
    """

    def __init__(self, broadcaster: WebSocketBroadcaster):
        self._broadcaster = broadcaster
        self._current_stage: Stage | None = None

    def update(self, stage: Stage):
        """Update the current stage and broadcast it to all clients."""
        self._current_stage = stage
        logger.log(CALL, f"Stage: {stage.value}")
        if self._broadcaster.connected:
            self._broadcaster.schedule("status_update", {"stage": stage.value})

    def get(self) -> str | None:
        """Get the current stage name."""
        return self._current_stage.value if self._current_stage is not None else None
