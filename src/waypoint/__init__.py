"""Waypoint — ordered, nestable request routing with explicit continuation.

Handlers run one at a time in registration order. Each one finishes the
request, calls ``next()`` to pass it on, or reports an error that the
nearest router with an error handler resolves.

Basic usage::

    from waypoint import ASGIApp, Router
    from waypoint.middleware import json_error_handler, not_found

    api = Router()

    @api.get("/hello/:name")
    def hello(request, response, next):
        response.json({"message": f"Hello {request.params['name']}!"})

    app = Router()
    app.use("/api", api)
    app.use(not_found)
    app.set_error_handler(json_error_handler)

    ASGIApp(app).run()
"""

__version__ = "0.1.0"
__all__ = [
    "ASGIApp",
    "ConfigurationError",
    "HTTPError",
    "Next",
    "NotFound",
    "PatternError",
    "Request",
    "Response",
    "Router",
    "ServerConfig",
    "WaypointError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name == "Next":
        from waypoint.routing.handlers import Next

        return Next

    if name == "Request":
        from waypoint.http.request import Request

        return Request

    if name == "Response":
        from waypoint.http.response import Response

        return Response

    if name == "ASGIApp":
        from waypoint.server.asgi import ASGIApp

        return ASGIApp

    if name == "ServerConfig":
        from waypoint.config import ServerConfig

        return ServerConfig

    if name in (
        "ConfigurationError",
        "HTTPError",
        "NotFound",
        "PatternError",
        "WaypointError",
    ):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
