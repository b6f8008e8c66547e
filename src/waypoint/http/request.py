"""Mutable request context.

Unlike the response, identity fields (method, url, headers) never change
after creation. ``path`` is filled in once by the top-level router and
``params`` is replaced on every successful route match. ``state`` is a
free-form dict where middleware attaches per-request values (user,
session, parsed body, ...).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from waypoint._internal.asgi import Receive, Scope
from waypoint.http.headers import Headers

# RFC 3986 pchar minus "%": everything a decoded path may keep unescaped
_PATH_SAFE = "/:@!$&'()*+,;=-._~"


async def _empty_receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(slots=True)
class Request:
    """An HTTP request as seen by route handlers.

    ``url`` is the raw request target (path plus query string). ``path``
    is empty until the top-level router normalises it.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    path: str = ""
    params: dict[str, str] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_receive, repr=False, compare=False)
    _body: bytes | None = field(default=None, repr=False, compare=False)

    @property
    def query_string(self) -> str:
        """Everything after the first ``?`` in the request target."""
        _, _, query = self.url.partition("?")
        return query

    # -- Raw body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Cached — the ASGI receive is consumed once, then the same bytes
        are returned on subsequent calls.
        """
        if self._body is None:
            self._body = b"".join([chunk async for chunk in self.stream()])
        return self._body

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> Request:
        """Create a request without a transport, e.g. in tests."""
        request = cls(
            method=method.upper(),
            url=url,
            headers=Headers.from_mapping(headers or {}),
        )
        if body is not None:
            request._body = body
        return request

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable.

        ``url`` is the request target as sent, built from ``raw_path`` so
        that an encoded ``%3F`` stays part of the path. Servers that omit
        ``raw_path`` get the decoded path re-quoted.
        """
        raw_path = scope.get("raw_path")
        if raw_path:
            target = raw_path.decode("latin-1")
        else:
            target = quote(scope["path"], safe=_PATH_SAFE)
        query = scope.get("query_string", b"")
        url = f"{target}?{query.decode('latin-1')}" if query else target
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            url=url,
            headers=Headers(tuple(scope.get("headers", ()))),
            client=tuple(client) if client else None,
            _receive=receive,
        )
