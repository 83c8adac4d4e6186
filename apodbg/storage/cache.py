"""
Date-stamped cache for the daily background.

A record is valid only on the calendar day it was written; the last-visit
marker forces a fresh fetch on the first trigger of a new day.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import TYPE_CHECKING

from apodbg.config import CACHE_KEY, LAST_VISIT_KEY
from apodbg.models import CacheRecord
from apodbg.utils import json_minify


if TYPE_CHECKING:
    from apodbg.storage.store import KeyValueStore


logger = logging.getLogger("APODBackground")


class BackgroundCache:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        cache_key: str = CACHE_KEY,
        last_visit_key: str = LAST_VISIT_KEY,
    ):
        self._store = store
        self._cache_key = cache_key
        self._last_visit_key = last_visit_key

    def read(self) -> CacheRecord | None:
        """Return the stored record, or None if there is none or it can't be decoded."""
        raw = self._store.get(self._cache_key)
        if not raw:
            return None
        try:
            return CacheRecord.from_json(json.loads(raw))
        except (ValueError, OverflowError, OSError) as exc:
            # json.JSONDecodeError is a ValueError; OverflowError/OSError come from odd timestamps
            logger.warning(f"Ignoring malformed cache record: {exc}")
            return None

    def write(self, record: CacheRecord) -> None:
        self._store.set(self._cache_key, json_minify(record.to_json()))
        logger.debug(f"Cached {record!r}")

    def clear(self) -> None:
        self._store.remove(self._cache_key)

    @staticmethod
    def is_valid(record: CacheRecord | None, today: date) -> bool:
        """A record is usable only on the day it was made, and only if it points somewhere."""
        return record is not None and bool(record.image_url) and record.date == today

    def last_visit(self) -> str:
        return self._store.get(self._last_visit_key) or ""

    def check_last_visit(self, today: date) -> bool:
        """
        Record today's visit. On the first visit of a new day the cached record is
        dropped, so the next lookup has to fetch.

        Returns True if the cache was invalidated.
        """
        today_str = today.isoformat()
        new_day = self.last_visit() != today_str
        if new_day:
            logger.info("First visit today, forcing APOD refresh")
            self.clear()
        self._store.set(self._last_visit_key, today_str)
        return new_day

    def reset(self) -> None:
        """Forget both the record and the last-visit marker."""
        self._store.remove(self._cache_key)
        self._store.remove(self._last_visit_key)
