"""Waypoint exception hierarchy.

Shared across Router, handlers, middleware, and the ASGI adapter so every
module raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a router is registered with something it cannot use.

    Typically raised during setup, e.g. ``router.use()`` with a value that
    is neither a handler nor a Router.
    """


class PatternError(ConfigurationError):
    """Raised when a route template cannot be compiled.

    Templates are compiled lazily, so this surfaces at match time.
    """


class ResponseError(WaypointError):
    """Raised when writing to a response that has already been ended."""


class UnhandledError(WaypointError):
    """A non-exception error value escaped the top-level router.

    Handlers may pass any value to ``next()``. When no error handler
    consumes it and it is not an exception, it is wrapped in this type
    before being raised to the transport layer.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unhandled error value: {value!r}")
        self.value = value


@dataclass(frozen=True, slots=True)
class HTTPError(WaypointError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers and middleware. Error handlers (or the ASGI
    adapter, when none is installed) read ``status`` to build the
    failure response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — nothing handled the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
