"""ASGI adapter — hosts a top-level Router behind any ASGI server.

The only component that touches raw ASGI directly. Converts HTTP scopes
to Request/Response objects, runs the router's top-level dispatch, and
sends the buffered Response back through ASGI ``send()``.
"""

import logging

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.config import ServerConfig
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.outcome import Continue
from waypoint.routing.router import Router
from waypoint.server.errors import internal_error_response, not_found_response
from waypoint.server.sender import send_response

logger = logging.getLogger("waypoint.server")


class ASGIApp:
    """ASGI 3 application wrapping a top-level Router.

    Usage::

        app = Router()
        ...
        application = ASGIApp(app, ServerConfig(port=3001))
        application.run()
    """

    __slots__ = ("config", "router")

    def __init__(self, router: Router, config: ServerConfig | None = None) -> None:
        self.router = router
        self.config: ServerConfig = config or ServerConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self.handle(request)
        await send_response(response, send)

    async def handle(self, request: Request) -> Response:
        """Dispatch one request and return the response to send.

        Errors escaping the router become a 500 (or the HTTPError's
        status). A request nothing resolved becomes a 404 unless some
        handler already wrote to the response.
        """
        response = Response()
        try:
            outcome = await self.router.handle_request(request, response)
        except Exception as exc:
            return internal_error_response(exc, request, debug=self.config.debug)

        if isinstance(outcome, Continue) and not response.committed:
            return not_found_response(request, self.config.not_found_body)
        return response

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.debug("Serving %r", self.router)
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with uvicorn on *host*:*port* (defaults from config)."""
        import uvicorn

        uvicorn.run(
            self,
            host=host if host is not None else self.config.host,
            port=port if port is not None else self.config.port,
            log_level=self.config.log_level,
        )
