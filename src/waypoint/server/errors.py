"""Fault handling for errors that escape the top-level router.

Builds a fresh Response for an error no router's error handler
consumed, and for requests nothing resolved.
"""

import logging
import traceback

from waypoint.errors import HTTPError
from waypoint.http.request import Request
from waypoint.http.response import Response

logger = logging.getLogger("waypoint.server")


def http_error_response(exc: HTTPError, request: Request) -> Response:
    """Map an escaped HTTPError to a response with its status and headers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    response = Response(exc.status)
    for name, value in exc.headers:
        response.add_header(name, value)
    response.text(exc.detail or f"Error {exc.status}")
    return response


def internal_error_response(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Handle an unexpected escaped exception as a 500."""
    if isinstance(exc, HTTPError):
        return http_error_response(exc, request)

    logger.exception("500 %s %s", request.method, request.path or request.url)

    response = Response(500)
    if debug:
        response.text("".join(traceback.format_exception(exc)))
    else:
        response.text("Internal Server Error")
    return response


def not_found_response(request: Request, body: str) -> Response:
    """Response for a request that no route resolved."""
    logger.debug("404 %s %s — unresolved", request.method, request.path)
    response = Response(404)
    response.text(body)
    return response
