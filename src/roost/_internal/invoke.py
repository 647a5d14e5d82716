"""Invoke helpers — call sync or async handlers uniformly.

Roost handlers and error handlers can be ``def`` or ``async def``. Any
code that calls a user-provided handler must handle both cases. This
module provides a single helper so the sync/async check lives in exactly
one place.

Usage::

    from roost._internal.invoke import invoke

    result = await invoke(handler, request, response)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync — returns immediately
        def hello(request, response):
            return 200, "hello"

        # async — awaited before dispatch looks at the result
        async def hello(request, response):
            name = await lookup_name()
            return 200, f"hello {name}"
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
