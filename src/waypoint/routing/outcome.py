"""Handler outcomes — the result of running one route.

Every handler invocation and every nested router dispatch resolves to
exactly one of:

- ``Handled``  — the request is finished; stop trying routes.
- ``Continue`` — this route declined; try the next matching one.
- ``Failed``   — the route reported an error; resolve it at the nearest
  router with an error handler.

Errors travel between routers as ``Failed`` values rather than raises.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Handled:
    """The request was resolved (a handler finished without calling next)."""


@dataclass(frozen=True, slots=True)
class Continue:
    """The route asked for the next matching route."""


@dataclass(frozen=True, slots=True)
class Failed:
    """The route reported an error.

    ``error`` is the value passed to ``next()`` or the exception raised
    by the handler. It is carried unchanged across router boundaries.
    """

    error: Any


type Outcome = Handled | Continue | Failed

HANDLED = Handled()
CONTINUE = Continue()
