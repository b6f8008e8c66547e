"""Built-in handlers: request logging, 404 fallback, JSON error handler.

Typical placement::

    app.use(log_requests)          # first: sees every request
    app.use("/api", api_router)
    app.use(not_found)             # last: nothing else resolved it
    app.set_error_handler(JSONErrorHandler(debug=True))
"""

import logging
from typing import Any

from waypoint.errors import HTTPError, NotFound
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.handlers import Next

logger = logging.getLogger("waypoint.access")
error_logger = logging.getLogger("waypoint.server")


def log_requests(request: Request, response: Response, next: Next) -> None:
    """Log the method and target of every request, then continue."""
    logger.info("%s %s", request.method, request.url)
    next()


def not_found(request: Request, response: Response, next: Next) -> None:
    """Fail the request with ``NotFound``.

    Register last with ``use()`` so it only runs when no earlier route
    resolved the request.
    """
    raise NotFound(f"Cannot {request.method} {request.path}")


class JSONErrorHandler:
    """Error handler writing ``{"message": ...}`` as JSON.

    ``HTTPError`` keeps its status and headers; anything else is logged
    and answered with a 500. With ``debug=True`` the body also carries
    the error's type name.

    A response that already carries output is not mixed with JSON: an
    ended one is left alone, a partially written one is ended as-is.
    Both cases are logged.
    """

    __slots__ = ("debug",)

    def __init__(self, *, debug: bool = False) -> None:
        self.debug = debug

    def __call__(self, error: Any, request: Request, response: Response) -> None:
        if response.finished:
            error_logger.warning(
                "Error after response ended for %s %s: %r", request.method, request.path, error
            )
            return
        if response.committed:
            error_logger.warning(
                "Error after partial write for %s %s: %r", request.method, request.path, error
            )
            response.end()
            return

        if isinstance(error, HTTPError):
            response.status(error.status)
            for name, value in error.headers:
                response.set_header(name, value)
            body: dict[str, Any] = {"message": error.detail or f"Error {error.status}"}
        else:
            error_logger.error("500 %s %s: %r", request.method, request.path, error)
            response.status(500)
            message = str(error) if isinstance(error, Exception) else ""
            body = {"message": message or "Internal Server Error"}

        if self.debug:
            body["type"] = type(error).__name__

        response.json(body)


json_error_handler = JSONErrorHandler()
