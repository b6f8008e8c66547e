"""Buffered, mutable HTTP response.

Handlers write into the response while the dispatch loop runs; the ASGI
adapter sends it once the top-level router returns. Status and headers
can change until the response is ended.
"""

from __future__ import annotations

import json as json_module
from typing import Any

from waypoint.errors import ResponseError


class Response:
    """An HTTP response under construction.

    ``write()`` appends to the body; ``end()`` optionally appends a final
    chunk and closes the response. Any write after ``end()`` raises
    ``ResponseError``.

    Usage::

        def hello(request, response, next):
            response.status(201).set_header("X-Hello", "world")
            response.end("created")
    """

    __slots__ = ("_chunks", "_finished", "headers", "status_code")

    def __init__(self, status: int = 200) -> None:
        self.status_code = status
        self.headers: list[tuple[str, str]] = []
        self._chunks: list[bytes] = []
        self._finished = False

    def __repr__(self) -> str:
        state = "finished" if self._finished else "open"
        return f"<Response {self.status_code} {state} {len(self.body_bytes)}B>"

    # -- State --

    @property
    def finished(self) -> bool:
        """True once ``end()`` has been called."""
        return self._finished

    @property
    def committed(self) -> bool:
        """True if any handler ended the response or wrote body bytes."""
        return self._finished or bool(self._chunks)

    @property
    def body_bytes(self) -> bytes:
        return b"".join(self._chunks)

    @property
    def text_body(self) -> str:
        return self.body_bytes.decode("utf-8")

    # -- Status and headers --

    def status(self, code: int) -> Response:
        """Set the status code. Returns self for chaining."""
        self._check_open()
        self.status_code = code
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Set a header, replacing existing values with the same name."""
        self._check_open()
        lower = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != lower]
        self.headers.append((name, value))
        return self

    def add_header(self, name: str, value: str) -> Response:
        """Append a header value without replacing existing ones."""
        self._check_open()
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        """Return the last value set for *name* (case-insensitive)."""
        lower = name.lower()
        for header_name, value in reversed(self.headers):
            if header_name.lower() == lower:
                return value
        return None

    # -- Body --

    def write(self, chunk: str | bytes) -> Response:
        """Append *chunk* to the body."""
        self._check_open()
        self._chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
        return self

    def end(self, chunk: str | bytes | None = None) -> None:
        """Finish the response, optionally writing a last chunk."""
        if chunk is not None:
            self.write(chunk)
        self._check_open()
        self._finished = True

    def text(self, body: str, *, content_type: str = "text/plain; charset=utf-8") -> None:
        """Send *body* as text and end the response."""
        if self.get_header("content-type") is None:
            self.set_header("Content-Type", content_type)
        self.end(body)

    def json(self, data: Any) -> None:
        """Serialise *data* as JSON and end the response."""
        self.set_header("Content-Type", "application/json")
        self.end(json_module.dumps(data))

    def _check_open(self) -> None:
        if self._finished:
            msg = "Response has already been ended"
            raise ResponseError(msg)
