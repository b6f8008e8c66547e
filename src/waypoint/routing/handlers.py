"""Route handler variants and the continuation object.

A route holds one of two handler kinds:

- ``LeafHandler`` — a user function ``(request, response, next[, path])``,
  sync or async.
- ``MountedRouter`` — a child ``Router`` whose own dispatch loop runs with
  the mount's effective path as its prefix.

Both expose ``run(request, response, effective_path) -> Outcome``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from waypoint._internal.invoke import accepts_positional, invoke
from waypoint._internal.types import Handler
from waypoint.routing.outcome import CONTINUE, HANDLED, Failed, Outcome

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.http.response import Response
    from waypoint.routing.router import Router

logger = logging.getLogger("waypoint.routing")


class Next:
    """The ``next`` callable handed to every leaf handler.

    Calling it only records what the handler asked for; nothing resumes
    until the handler returns. ``next()`` asks for the next matching
    route, ``next(error)`` reports a failure. The last call wins.
    """

    __slots__ = ("called", "error")

    def __init__(self) -> None:
        self.called = False
        self.error: Any = None

    def __call__(self, error: Any = None) -> None:
        self.called = True
        self.error = error

    def outcome(self) -> Outcome:
        """Translate what was recorded into an ``Outcome``."""
        if self.error is not None:
            return Failed(self.error)
        if self.called:
            return CONTINUE
        return HANDLED


@dataclass(frozen=True, slots=True)
class LeafHandler:
    """A user-supplied handler function.

    ``takes_path`` is decided once, at registration, from the function's
    signature: handlers accepting a fourth positional argument receive
    the effective path of the route that matched.
    """

    func: Handler
    takes_path: bool = False

    @classmethod
    def wrap(cls, func: Handler) -> LeafHandler:
        return cls(func=func, takes_path=accepts_positional(func, 4))

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)

    async def run(self, request: Request, response: Response, effective_path: str) -> Outcome:
        next = Next()
        args: tuple[Any, ...] = (request, response, next)
        if self.takes_path:
            args = (*args, effective_path)

        try:
            await invoke(self.func, *args)
        except Exception as exc:
            logger.debug("Handler %s raised %r for %s %s", self.name, exc, request.method, request.path)
            return Failed(exc)

        return next.outcome()


@dataclass(frozen=True, slots=True)
class MountedRouter:
    """A child router registered as a handler on its parent.

    The child's outcome is returned as-is: ``Continue`` when its table had
    nothing that resolved the request, ``Failed`` when it had an error and
    no error handler of its own. Anything the child's dispatch raises
    (a template that fails to compile, a custom compiler error) becomes
    ``Failed`` too, so the parent's error handler sees it.
    """

    router: Router

    @property
    def name(self) -> str:
        return self.router.name or type(self.router).__name__

    async def run(self, request: Request, response: Response, effective_path: str) -> Outcome:
        try:
            return await self.router.dispatch(request, response, prefix=effective_path)
        except Exception as exc:
            logger.debug("Mounted router %s raised %r for %s %s", self.name, exc, request.method, request.path)
            return Failed(exc)


type RouteHandler = LeafHandler | MountedRouter
