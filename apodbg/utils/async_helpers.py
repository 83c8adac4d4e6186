"""Async programming utilities and helpers."""

from __future__ import annotations

import logging
from collections import abc
from functools import wraps
from typing import Any, ParamSpec, TypeVar


_T = TypeVar("_T")  # type
_P = ParamSpec("_P")  # params

logger = logging.getLogger("APODBackground")


def task_wrapper(
    afunc: abc.Callable[_P, abc.Coroutine[Any, Any, _T]] | None = None, *, reraise: bool = False
):
    """
    Decorator for fire-and-forget async tasks that logs their failures.

    Args:
        afunc: The async function to wrap
        reraise: If True, the exception is raised up to the wrapping task after logging

    A task spawned with `asyncio.create_task` has nobody awaiting it, so without this
    its exception would only surface as "Task exception was never retrieved" on shutdown.
    """

    def decorator(
        afunc: abc.Callable[_P, abc.Coroutine[Any, Any, _T]],
    ) -> abc.Callable[_P, abc.Coroutine[Any, Any, _T | None]]:
        @wraps(afunc)
        async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T | None:
            try:
                return await afunc(*args, **kwargs)
            except Exception:
                logger.exception(f"Exception in {afunc.__name__} task")
                if reraise:
                    raise
                return None

        return wrapper

    if afunc is None:
        return decorator
    return decorator(afunc)
