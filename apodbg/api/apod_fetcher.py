"""Fetches the APOD page HTML, through the CORS relay when one is configured."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING
from urllib.parse import quote

from yarl import URL

from apodbg.config import APOD_PAGE_URL


if TYPE_CHECKING:
    from apodbg.api.http_client import HTTPClient
    from apodbg.config.settings import Settings


logger = logging.getLogger("APODBackground")


class ApodFetcher:
    def __init__(self, http: HTTPClient, settings: Settings, *, page_url: str = APOD_PAGE_URL):
        self._http = http
        self._settings = settings
        self._page_url = page_url

    def build_url(self) -> URL:
        """
        The URL to GET for today's page.

        A random `nocache` parameter defeats any caching along the way. With a relay
        configured, the whole target URL is percent-encoded onto the relay prefix.
        """
        target = f"{self._page_url}?nocache={random.random()}"
        relay = self._settings.cors_proxy
        if not relay:
            return URL(target)
        # encoded=True keeps yarl from re-quoting the already encoded target
        return URL(relay + quote(target, safe=""), encoded=True)

    async def fetch_page(self) -> str:
        """
        Return the APOD page HTML.

        Raises NetworkError if the relay or the site can't be reached,
        or doesn't answer with a success status.
        """
        url = self.build_url()
        logger.info(f"Fetching APOD page via {url.host}")
        return await self._http.get_text(url)
