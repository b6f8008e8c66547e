"""Invoke helpers — call sync or async handlers uniformly.

Route handlers and error handlers can be ``def`` or ``async def``. Any
code that calls a user-provided function must handle both cases. This
module keeps the sync/async check in exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(handler, request, response, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        def hello(request, response, next):
            response.text("hello")

        # async: returns a coroutine, awaited before returning
        async def hello(request, response, next):
            user = await load_user(request.params["id"])
            response.json({"name": user.name})
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_positional(func: Any, count: int) -> bool:
    """Return True if *func* can be called with *count* positional args.

    Used to decide whether a handler takes the optional trailing
    arguments of its contract. Callables whose signature cannot be
    inspected (some builtins) are assumed not to.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    positional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= count
