"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: (request, response, next[, effective_path]) -> None | Awaitable[None]
Handler: TypeAlias = Callable[..., Any]

# Error handler: (error, request, response) -> None | Awaitable[None]
ErrorHandler: TypeAlias = Callable[..., Any]

# Methods with their own route table, in table-creation order
METHODS: tuple[str, ...] = ("GET", "POST", "OPTIONS", "DELETE", "PUT", "PATCH")
