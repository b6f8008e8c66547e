"""Import resolution — ``"module:attribute"`` strings to ASGI apps.

Shared by ``waypoint run`` and ``waypoint routes``.
"""

import importlib

from waypoint.routing.router import Router
from waypoint.server.asgi import ASGIApp


def resolve_app(import_string: str) -> ASGIApp:
    """Resolve an import string to an ``ASGIApp``.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"app"``. A resolved ``Router`` is wrapped in an
    ``ASGIApp`` with default config; any other callable is treated as a
    factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the object is not a Router or ASGIApp.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, (Router, ASGIApp)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, Router):
        return ASGIApp(obj)
    if isinstance(obj, ASGIApp):
        return obj

    msg = f"{import_string!r} resolved to {type(obj).__name__}, not a waypoint Router or ASGIApp"
    raise TypeError(msg)
