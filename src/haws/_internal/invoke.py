"""Invoke helpers — call sync or async handlers uniformly.

Haws handlers are usually plain ``def`` functions, but ``async def``
handlers are accepted too. This module keeps the sync/async check and
the return-type check in one place.

Usage::

    from haws._internal.invoke import invoke

    body = await invoke(route.handler, buffer)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> str:
    """Call a handler, await the result if needed, and return the body.

    Raises:
        TypeError: The handler returned something other than ``str``.
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, str):
        name = getattr(handler, "__name__", repr(handler))
        msg = f"Handler {name!r} returned {type(result).__name__}, expected str"
        raise TypeError(msg)
    return result
