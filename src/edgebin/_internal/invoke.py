"""Invoke helpers: call sync or async handlers uniformly.

Route handlers and lifecycle hooks can be ``def`` or ``async def``.
The sync/async check lives here so callers never repeat it::

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
