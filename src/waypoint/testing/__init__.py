"""Test utilities for waypoint routers.

Provides an ASGI-level test client and a helper for driving a Router's
dispatch loop directly::

    from waypoint.testing import TestClient, dispatch
"""

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.outcome import Outcome
from waypoint.routing.router import Router
from waypoint.testing.client import TestClient


async def dispatch(
    router: Router,
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
) -> tuple[Request, Response, Outcome]:
    """Run *router*'s top-level dispatch for a synthetic request.

    Escaped errors are raised, not converted to responses.
    """
    request = Request.build(method, url, headers=headers)
    response = Response()
    outcome = await router.handle_request(request, response)
    return request, response, outcome


__all__ = ["TestClient", "dispatch"]
