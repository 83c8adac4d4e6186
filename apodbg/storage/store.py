"""
Key-value stores holding string values, in the manner of browser local storage.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import abc
from pathlib import Path

from apodbg.utils import json_load, json_save


logger = logging.getLogger("APODBackground")


class KeyValueStore(ABC):
    """String-to-string storage. Single writer at a time; every call is atomic."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...

    @abstractmethod
    def keys(self) -> abc.Iterable[str]: ...


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> abc.Iterable[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    A store persisted as a single JSON object on disk.

    The whole file is read once on creation and rewritten on every change.
    A file that can't be parsed is logged and treated as empty; it is replaced
    on the next write.
    """

    def __init__(self, path: Path):
        self._path = path
        self._data: dict[str, str] = {}
        try:
            loaded = json_load(path, {}, merge=False)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Storage file {path} is unreadable, starting empty: {exc}")
        else:
            if isinstance(loaded, dict):
                self._data = {k: v for k, v in loaded.items() if isinstance(v, str)}
            else:
                logger.warning(f"Storage file {path} doesn't hold an object, starting empty")

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        json_save(self._path, self._data, sort=True)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> abc.Iterable[str]:
        return list(self._data)
