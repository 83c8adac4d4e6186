"""
The APOD background loader.

One pass per trigger:

    check cache ─┬─ hit ──────────────────────────────────────────────┐
                 └─ miss → fetch page → extract ─┬─ found ─→ process ─┤→ cache → render
                                                 └─ miss → guess URL ─┤
                                                               └─ none → fallback → render

Each step's failure is recovered on the spot; a pass always ends with a background applied.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from apodbg.api import ApodFetcher, HTTPClient
from apodbg.config import FALLBACK_BACKGROUND, Stage
from apodbg.exceptions import ExtractionMiss, ImageLoadError, NetworkError, SerializationError
from apodbg.models import CacheRecord
from apodbg.services import DirectURLGuesser, ImageProcessor, extract_image_url
from apodbg.storage import BackgroundCache
from apodbg.utils import SystemClock


if TYPE_CHECKING:
    from apodbg.config.settings import Settings
    from apodbg.storage import KeyValueStore
    from apodbg.utils import Clock
    from apodbg.web.page_manager import WebPageManager


logger = logging.getLogger("APODBackground")


class BackgroundLoader:
    def __init__(
        self,
        settings: Settings,
        store: KeyValueStore,
        page: WebPageManager,
        *,
        clock: Clock | None = None,
        http: HTTPClient | None = None,
    ):
        self.settings = settings
        self.page = page
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.http: HTTPClient = http if http is not None else HTTPClient(settings)
        self.cache = BackgroundCache(store)
        self.fetcher = ApodFetcher(self.http, settings)
        self.guesser = DirectURLGuesser(self.http)
        self.processor = ImageProcessor(
            self.http,
            max_dimension=settings.max_dimension,
            quality=settings.jpeg_quality,
        )
        page.settings.set_on_change(self.apply_settings)

    def apply_settings(self) -> None:
        """Pick up changed image processing settings."""
        self.processor.max_dimension = self.settings.max_dimension
        self.processor.quality = self.settings.jpeg_quality

    def _stage(self, stage: Stage) -> None:
        self.page.status.update(stage)

    # triggers

    async def on_page_load(self) -> str:
        """A page was loaded: start a new day if needed, then resolve the background."""
        try:
            self.cache.check_last_visit(self.clock.today())
        except OSError as exc:
            logger.error(f"Could not update the last visit marker: {exc}")
        return await self.fetch_apod_image()

    async def on_visibility_change(self, state: str) -> str | None:
        """The page became visible or hidden. Only becoming visible does anything."""
        if state != "visible":
            logger.debug(f"Ignoring visibility change to {state!r}")
            return None
        return await self.on_page_load()

    # pipeline

    async def fetch_apod_image(self) -> str:
        """
        Resolve today's background, apply it and return the image reference.

        Never raises. An unexpected error still ends with the fallback background.
        """
        today = self.clock.today()
        self._stage(Stage.START)
        try:
            return await self._resolve(today)
        except Exception:
            logger.exception("Unexpected error while loading the APOD background")
            return self._fallback_to_default(today)

    async def _resolve(self, today: date) -> str:
        self._stage(Stage.CHECK_CACHE)
        record = self.cache.read()
        if record is not None and self.cache.is_valid(record, today):
            logger.info(f"Using today's cached APOD image from {today.isoformat()}")
            self._stage(Stage.USE_CACHE)
            return self._render(record.image_url)

        logger.info(f"Need to fetch new APOD image for {today.isoformat()}")
        self._stage(Stage.FETCH)
        image_url: str | None = None
        try:
            html = await self.fetcher.fetch_page()
            image_url = extract_image_url(html)
        except NetworkError as exc:
            logger.error(f"Error fetching APOD: {exc}")
        except ExtractionMiss as exc:
            logger.error(str(exc))

        if image_url is None:
            self._stage(Stage.GUESS_DIRECT_URL)
            image_url = await self.guesser.guess(today)
            if image_url is None:
                logger.info("Direct URL image not found, falling back to default")
                return self._fallback_to_default(today)

        return await self._download_and_process(image_url, today)

    async def _download_and_process(self, image_url: str, today: date) -> str:
        if not self.settings.downsample:
            record = CacheRecord(image_url, today)
        else:
            self._stage(Stage.PROCESS)
            try:
                processed = await self.processor.process(image_url)
            except ImageLoadError as exc:
                logger.error(f"Error loading image for processing: {exc}")
                return self._fallback_to_default(today)
            except SerializationError as exc:
                # keep the remote URL, the page can still load it directly
                logger.error(str(exc))
                record = CacheRecord(image_url, today)
            else:
                record = CacheRecord(
                    processed.data_url, today, width=processed.width, height=processed.height
                )
                logger.info(f"Image processed for {today.isoformat()} ({processed.width}x{processed.height})")

        self._write(record)
        return self._render(record.image_url)

    def _fallback_to_default(self, today: date) -> str:
        self._stage(Stage.FALLBACK)
        logger.info("Using default background image")
        default = self.settings.default_background or FALLBACK_BACKGROUND
        self._write(CacheRecord(default, today))
        return self._render(default)

    def _write(self, record: CacheRecord) -> None:
        self._stage(Stage.CACHE)
        try:
            self.cache.write(record)
        except OSError as exc:
            logger.error(f"Could not store the background: {exc}")

    def _render(self, image_url: str) -> str:
        self._stage(Stage.RENDER)
        self.page.background.apply(image_url)
        return image_url

    async def close(self) -> None:
        await self.http.close()
