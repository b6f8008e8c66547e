"""Router — ordered route tables with nested, composable dispatch.

Routes are registered during setup and tried strictly in registration
order at dispatch time. A Router is also a handler: mounting one router
inside another with ``use()`` gives the child its own table and its own
optional error handler.

Usage::

    api = Router(name="api")

    @api.get("/hello/:name")
    def hello(request, response, next):
        response.json({"message": f"Hello {request.params['name']}!"})

    app = Router()
    app.use(add_headers)
    app.use("/api", api)
    app.use(not_found)
    app.set_error_handler(json_error_handler)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, NoReturn

from waypoint._internal.invoke import invoke
from waypoint._internal.types import METHODS, ErrorHandler, Handler
from waypoint.errors import ConfigurationError, UnhandledError
from waypoint.routing.handlers import LeafHandler, MountedRouter, RouteHandler
from waypoint.routing.outcome import CONTINUE, HANDLED, Continue, Failed, Outcome
from waypoint.routing.pattern import PatternCompiler, compile_pattern
from waypoint.routing.route import Route, RouteMatch

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.http.response import Response

logger = logging.getLogger("waypoint.routing")


def normalize_path(url: str) -> str:
    """Strip the query component from a request target."""
    return url.split("?", 1)[0]


def as_route_handler(handler: Any) -> RouteHandler:
    """Pick the handler variant for a registration argument."""
    if isinstance(handler, Router):
        return MountedRouter(handler)
    if callable(handler):
        return LeafHandler.wrap(handler)
    msg = f"Expected a handler function or Router, got {type(handler).__name__}"
    raise ConfigurationError(msg)


class Router:
    """Per-method route tables plus an optional error handler.

    Thread safety:
        Tables are built during setup and only read while serving.
        Registering routes while requests are being dispatched is not
        supported.
    """

    __slots__ = ("_compiler", "_error_handler", "_routes", "name")

    def __init__(
        self,
        *,
        name: str | None = None,
        compiler: PatternCompiler = compile_pattern,
    ) -> None:
        self.name = name
        self._compiler = compiler
        self._routes: dict[str, list[Route]] = {method: [] for method in METHODS}
        self._error_handler: ErrorHandler | None = None

    def __repr__(self) -> str:
        count = sum(len(routes) for routes in self._routes.values())
        label = f" {self.name!r}" if self.name else ""
        return f"<Router{label} routes={count}>"

    # -- Registration --

    def use(self, path_or_handler: Any, *handlers: Any) -> Any:
        """Register middleware or mount child routers on every method.

        The first argument is either a path prefix or the first handler
        (an unprefixed mount). Each handler is registered as a catch-all
        route, matching the path and everything under it::

            app.use(log_request)
            app.use("/api", auth, api_router)

        Called with only a path, returns a decorator.
        """
        if isinstance(path_or_handler, str):
            path = path_or_handler
        else:
            path = ""
            handlers = (path_or_handler, *handlers)

        if not handlers:
            return self._decorator(path, METHODS, catch_all=True)

        for handler in handlers:
            route_handler = as_route_handler(handler)
            for method in METHODS:
                self._register(method, path, route_handler, catch_all=True)
        return None

    def get(self, path: str, *handlers: Handler) -> Any:
        """Register GET handlers, or return a decorator when none are given."""
        return self._add("GET", path, handlers)

    def post(self, path: str, *handlers: Handler) -> Any:
        """Register POST handlers, or return a decorator when none are given."""
        return self._add("POST", path, handlers)

    def put(self, path: str, *handlers: Handler) -> Any:
        """Register PUT handlers, or return a decorator when none are given."""
        return self._add("PUT", path, handlers)

    def patch(self, path: str, *handlers: Handler) -> Any:
        """Register PATCH handlers, or return a decorator when none are given."""
        return self._add("PATCH", path, handlers)

    def delete(self, path: str, *handlers: Handler) -> Any:
        """Register DELETE handlers, or return a decorator when none are given."""
        return self._add("DELETE", path, handlers)

    def options(self, path: str, *handlers: Handler) -> Any:
        """Register OPTIONS handlers, or return a decorator when none are given."""
        return self._add("OPTIONS", path, handlers)

    def set_error_handler(self, handler: ErrorHandler) -> ErrorHandler:
        """Install this router's error handler, replacing any previous one.

        Called as ``handler(error, request, response)``; may be sync or
        async. Returns *handler*, so it also works as a decorator.
        """
        if not callable(handler):
            msg = f"Error handler must be callable, got {type(handler).__name__}"
            raise ConfigurationError(msg)
        self._error_handler = handler
        return handler

    @property
    def error_handler(self) -> ErrorHandler | None:
        return self._error_handler

    @property
    def routes(self) -> Mapping[str, tuple[Route, ...]]:
        """Registered routes per method, in registration order."""
        return {method: tuple(routes) for method, routes in self._routes.items()}

    def _add(self, method: str, path: str, handlers: tuple[Handler, ...]) -> Any:
        if not handlers:
            return self._decorator(path, (method,), catch_all=False)
        for handler in handlers:
            self._register(method, path, as_route_handler(handler))
        return None

    def _decorator(
        self,
        path: str,
        methods: tuple[str, ...],
        *,
        catch_all: bool,
    ) -> Callable[[Handler], Handler]:
        def decorator(func: Handler) -> Handler:
            route_handler = as_route_handler(func)
            for method in methods:
                self._register(method, path, route_handler, catch_all=catch_all)
            return func

        return decorator

    def _register(
        self,
        method: str,
        path: str,
        handler: RouteHandler,
        *,
        catch_all: bool = False,
    ) -> None:
        self._routes[method].append(Route(path=path, handler=handler, catch_all=catch_all))

    # -- Matching --

    def match(self, method: str, path: str, prefix: str = "") -> Iterator[RouteMatch]:
        """Yield the routes matching *path*, in registration order.

        Each candidate is compiled from ``prefix + route.path`` (plus a
        trailing wildcard for catch-all routes). A failed match is retried
        once with a trailing slash appended to *path*.

        Lazy: the dispatch loop consumes one match at a time, so a route's
        pattern is only evaluated after the previous handler settled.
        """
        for route in self._routes.get(method.upper(), ()):
            matcher = self._compiler(route.template(prefix))
            values = matcher.match(path)
            if values is None:
                values = matcher.match(path + "/")
            if values is None:
                continue

            params = {
                key: value
                for key, value in zip(matcher.keys, values, strict=False)
                if value is not None
            }
            yield RouteMatch(route=route, effective_path=route.effective_path(prefix), params=params)

    # -- Dispatch --

    async def dispatch(
        self,
        request: Request,
        response: Response,
        next: Callable[[], Any] | None = None,
        prefix: str = "",
    ) -> Outcome:
        """Run the dispatch loop for this router.

        Tries matching routes in order until one resolves the request
        (``HANDLED``), one fails, or the table is exhausted (``CONTINUE``,
        after calling *next* when given). A failure is consumed by this
        router's error handler when installed, and returned as ``Failed``
        otherwise.

        ``request.path`` must already be normalised; ``handle_request()``
        does this for top-level calls.
        """
        for match in self.match(request.method, request.path, prefix):
            # Params reflect only the most recent match
            request.params = match.params
            logger.debug(
                "%s %s matched %r -> %s",
                request.method,
                request.path,
                match.effective_path,
                match.route.handler.name,
            )

            outcome = await match.route.handler.run(request, response, match.effective_path)

            if isinstance(outcome, Failed):
                return await self._resolve_error(outcome, request, response)
            if isinstance(outcome, Continue):
                continue
            return HANDLED

        logger.debug("%s %s exhausted %r (prefix %r)", request.method, request.path, self, prefix)
        if next is not None:
            next()
        return CONTINUE

    async def _resolve_error(self, failure: Failed, request: Request, response: Response) -> Outcome:
        if self._error_handler is None:
            return failure

        try:
            await invoke(self._error_handler, failure.error, request, response)
        except Exception as exc:
            logger.debug("Error handler of %r raised %r", self, exc)
            return Failed(exc)
        return HANDLED

    async def handle_request(self, request: Request, response: Response) -> Outcome:
        """Top-level entry point for the transport layer.

        Normalises the request path once, dispatches with no prefix and no
        parent continuation, and raises any error no router consumed.
        Returns ``HANDLED`` or ``CONTINUE`` (nothing resolved the request).
        """
        request.path = normalize_path(request.url)
        outcome = await self.dispatch(request, response)
        if isinstance(outcome, Failed):
            raise_error(outcome.error)
        return outcome

    async def __call__(
        self,
        request: Request,
        response: Response,
        next: Callable[..., Any],
        prefix: str = "",
    ) -> None:
        """Handler contract: lets a Router run wherever a handler can."""
        outcome = await self.dispatch(request, response, next, prefix)
        if isinstance(outcome, Failed):
            raise_error(outcome.error)


def raise_error(error: Any) -> NoReturn:
    """Raise an escaped error value, wrapping non-exceptions."""
    if isinstance(error, BaseException):
        raise error
    raise UnhandledError(error)
