"""The page background: the pipeline's final, side-effecting step."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from apodbg.web.managers.broadcaster import WebSocketBroadcaster


logger = logging.getLogger("APODBackground")

BACKGROUND_CLASS = "withImageBackground"


def css_url(url: str) -> str:
    """`url('...')` with the reference made safe for a single-quoted CSS string."""
    safe = url.replace("\\", "%5C").replace("'", "%27").replace("\n", "").replace("\r", "")
    return f"url('{safe}')"


def build_style(url: str) -> dict[str, Any]:
    """
    Everything a page needs to show `url` as its background.

    The image goes both into the `--imgbg` custom property, for stylesheets that
    use it, and straight onto the body, layered under the `--imgcol` tint.
    """
    image = css_url(url)
    return {
        "url": url,
        "custom_properties": {"--imgbg": image},
        "body_class": BACKGROUND_CLASS,
        "body_style": {
            "background-image": f"var(--imgcol), {image}",
            "background-size": "cover",
            "background-position": "center",
        },
    }


class BackgroundManager:
    """Applies the resolved image as the page background.

    Keeps the current style, so newly connected pages and the stylesheet
    endpoint can pick it up, and pushes every change to open pages.
    """

    def __init__(self, broadcaster: WebSocketBroadcaster):
        self._broadcaster = broadcaster
        self._style: dict[str, Any] | None = None

    def apply(self, url: str) -> None:
        """Set the background. Never raises."""
        self._style = build_style(url)
        if not self._broadcaster.connected:
            return
        try:
            self._broadcaster.schedule("background_update", self._style)
        except RuntimeError:
            # no running event loop to broadcast from
            logger.warning("Background set outside of the event loop, not broadcasting")

    def get(self) -> dict[str, Any] | None:
        return self._style

    @property
    def url(self) -> str | None:
        return self._style["url"] if self._style is not None else None

    def css(self) -> str:
        """The current background as a stylesheet, empty if none is set yet."""
        if self._style is None:
            return ""
        properties = "".join(
            f"  {name}: {value};\n" for name, value in self._style["custom_properties"].items()
        )
        body = "".join(f"  {name}: {value};\n" for name, value in self._style["body_style"].items())
        return f":root {{\n{properties}}}\nbody.{BACKGROUND_CLASS}, body {{\n{body}}}\n"
