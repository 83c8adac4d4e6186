"""Socket.IO broadcaster for pushing background changes to open pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from socketio import AsyncServer


logger = logging.getLogger("APODBackground")


class WebSocketBroadcaster:
    """Sends events to every page connected over Socket.IO.

    Until the web app hands over its server, emitting is a no-op, which is what
    a one-shot command line run wants.
    """

    def __init__(self):
        self._sio: AsyncServer | None = None  # Will be set by webapp
        self._pending: set[asyncio.Task[None]] = set()

    def set_socketio(self, sio: AsyncServer):
        self._sio = sio

    @property
    def connected(self) -> bool:
        return self._sio is not None

    async def emit(self, event: str, data: Any):
        """Emit an event to all connected clients.

        Args:
            event: The event name to emit
            data: The data payload to send with the event
        """
        if self._sio:
            try:
                await self._sio.emit(event, data)
            except Exception:
                # a page that went away mid-emit must not break the pipeline
                logger.exception(f"Failed to broadcast {event}")

    def schedule(self, event: str, data: Any) -> asyncio.Task[None]:
        """Emit in the background. The task is held until it finishes.

        Raises RuntimeError when there's no running event loop.
        """
        task = asyncio.create_task(self.emit(event, data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)
