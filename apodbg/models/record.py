from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from dateutil.parser import isoparse

if TYPE_CHECKING:
    from apodbg.config.constants import JsonType


class CacheRecord:
    """The cached background for one calendar day."""
    __slots__ = ("image_url", "date", "width", "height")

    def __init__(
        self,
        image_url: str,
        day: date,
        *,
        width: int | None = None,
        height: int | None = None,
    ):
        self.image_url: str = image_url
        self.date: date = day
        self.width: int | None = width
        self.height: int | None = height

    @classmethod
    def from_json(cls, data: JsonType) -> CacheRecord:
        """
        Build a record from its stored form.

        Older records carry a millisecond `timestamp` instead of a `date`;
        those are mapped onto the local calendar day the timestamp falls on.

        Raises ValueError if the payload isn't a usable record.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Cache record must be an object, got {type(data).__name__}")
        image_url = data.get("imageUrl")
        if not isinstance(image_url, str):
            raise ValueError("Cache record has no image URL")
        if isinstance(data.get("date"), str):
            day = isoparse(data["date"]).date()
        elif isinstance(data.get("timestamp"), (int, float)):
            day = datetime.fromtimestamp(data["timestamp"] / 1000).date()
        else:
            raise ValueError("Cache record has neither a date nor a timestamp")
        width = data.get("width")
        height = data.get("height")
        return cls(
            image_url,
            day,
            width=width if isinstance(width, int) else None,
            height=height if isinstance(height, int) else None,
        )

    def to_json(self) -> JsonType:
        data: JsonType = {"imageUrl": self.image_url, "date": self.date.isoformat()}
        if self.width is not None and self.height is not None:
            data["width"] = self.width
            data["height"] = self.height
        return data

    @property
    def is_embedded(self) -> bool:
        """True when the image itself is stored, rather than a link to it."""
        return self.image_url.startswith("data:")

    def __repr__(self) -> str:
        shown = "<data URL>" if self.is_embedded else self.image_url
        return f"CacheRecord({self.date.isoformat()}, {shown})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, self.__class__):
            return (
                self.image_url == other.image_url
                and self.date == other.date
                and self.width == other.width
                and self.height == other.height
            )
        return NotImplemented
