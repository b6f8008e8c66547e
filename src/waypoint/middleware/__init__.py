"""Middleware — plain handlers registered with ``router.use()``.

A middleware is any callable matching::

    def mw(request: Request, response: Response, next: Next) -> None: ...

Call ``next()`` to let later routes run, ``next(error)`` to fail the
request, or return without calling it to finish the request.

Built-in:
    log_requests -- Log every request and continue
    not_found -- Final fallback that fails with NotFound
    JSONErrorHandler -- Error handler writing a JSON body
    json_error_handler -- A JSONErrorHandler with default settings
"""

from waypoint.middleware.builtin import (
    JSONErrorHandler,
    json_error_handler,
    log_requests,
    not_found,
)
from waypoint.routing.handlers import Next

__all__ = [
    "JSONErrorHandler",
    "Next",
    "json_error_handler",
    "log_requests",
    "not_found",
]
