"""Reading and writing the JSON files the settings and the storage live in."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar, cast

from yarl import URL

from apodbg.config import JsonType


_JSON_T = TypeVar("_JSON_T", bound=Mapping[Any, Any])
_MISSING = object()


# tag -> constructor, for values written as {"__type": tag, "data": ...}
SERIALIZE_ENV: dict[str, Callable[[Any], object]] = {
    "URL": URL,
    "datetime": lambda d: datetime.fromtimestamp(d, timezone.utc),
}


def json_minify(data: JsonType | list[JsonType]) -> str:
    """Compact JSON text, as stored under a single storage key."""
    return json.dumps(data, separators=(',', ':'))


def _serialize(obj: Any) -> Any:
    # proxy URLs and timestamps get a tag, so loading restores the type
    d: float | str
    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=timezone.utc)
        d = obj.timestamp()
    elif isinstance(obj, URL):
        d = str(obj)
    else:
        raise TypeError(obj)
    return {
        "__type": type(obj).__name__,
        "data": d,
    }


def _remove_missing(obj: JsonType) -> JsonType:
    """Drop values whose tag wasn't recognized, along with dicts left empty by that."""
    for key, value in obj.copy().items():
        if value is _MISSING:
            del obj[key]
        elif isinstance(value, dict):
            _remove_missing(value)
            if not value:
                del obj[key]
    return obj


def _deserialize(obj: JsonType) -> Any:
    if "__type" in obj:
        obj_type = obj["__type"]
        if obj_type in SERIALIZE_ENV:
            return SERIALIZE_ENV[obj_type](obj["data"])
        return _MISSING
    return obj


def merge_json(obj: JsonType, template: Mapping[Any, Any]) -> None:
    """
    Conform a loaded settings object to the defaults, in place.

    Unknown keys are dropped, keys of the wrong type are reset to their default
    and missing keys are filled in. Nested objects are conformed the same way.
    """
    for k, v in list(obj.items()):
        if k not in template:
            del obj[k]
        elif type(v) is not type(template[k]):
            obj[k] = template[k]
        elif isinstance(v, dict):
            assert isinstance(template[k], dict)
            merge_json(v, template[k])
    for k in template:
        if k not in obj:
            obj[k] = template[k]


def json_load(path: Path, defaults: _JSON_T, *, merge: bool = True) -> _JSON_T:
    """
    Read `path`, or return a copy of `defaults` when the file doesn't exist yet.

    With `merge` off the content is returned as-is, which the key-value store
    needs since its keys aren't known up front.

    Raises:
        json.JSONDecodeError: the file isn't valid JSON
        OSError: the file can't be read
    """
    defaults_dict: JsonType = dict(defaults)
    if path.exists():
        with open(path, encoding="utf8") as file:
            combined: JsonType = json.load(file, object_hook=_deserialize)
        if not isinstance(combined, dict):
            # nothing to merge into; a free-form caller rejects it itself
            return cast(_JSON_T, defaults_dict if merge else combined)
        _remove_missing(combined)
        if merge:
            merge_json(combined, defaults_dict)
    else:
        combined = defaults_dict
    return cast(_JSON_T, combined)


def json_save(path: Path, contents: Mapping[Any, Any], *, sort: bool = False) -> None:
    """
    Write `contents` to `path` through a temporary file in the same directory.

    A failed write leaves the previous file in place.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding="utf8") as file:
            json.dump(contents, file, default=_serialize, sort_keys=sort, indent=4)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
