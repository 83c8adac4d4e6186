"""Web page manager modules for the APOD Background web interface.

This package contains the component managers behind the served page:
- WebSocketBroadcaster: Real-time message broadcasting to clients
- StatusManager: Current loader pipeline stage
- BackgroundManager: The applied background and its CSS
- SettingsManager: Application settings configuration
"""

from apodbg.web.managers.background import BackgroundManager, build_style
from apodbg.web.managers.broadcaster import WebSocketBroadcaster
from apodbg.web.managers.settings import SettingsManager
from apodbg.web.managers.status import StatusManager


__all__ = [
    "WebSocketBroadcaster",
    "StatusManager",
    "BackgroundManager",
    "build_style",
    "SettingsManager",
]
