"""``waypoint routes`` — list registered routes.

Prints every route table in registration order, descending into mounted
routers with their accumulated prefix.
"""

import argparse
import sys

from waypoint._internal.types import METHODS
from waypoint.cli._resolve import resolve_app
from waypoint.routing.handlers import MountedRouter
from waypoint.routing.router import Router


def collect_rows(router: Router, method: str, prefix: str = "") -> list[tuple[str, str, str, str]]:
    """Flatten one method's table into (METHOD, PATH, KIND, HANDLER) rows."""
    rows: list[tuple[str, str, str, str]] = []
    for route in router.routes[method]:
        path = route.template(prefix) or "/"
        handler = route.handler
        if isinstance(handler, MountedRouter):
            rows.append((method, path, "mount", handler.name))
            rows.extend(collect_rows(handler.router, method, route.effective_path(prefix)))
        else:
            kind = "use" if route.catch_all else "route"
            rows.append((method, path, kind, handler.name))
    return rows


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH, KIND, and HANDLER."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [row for method in METHODS for row in collect_rows(app.router, method)]
    if not rows:
        print("No routes registered.")
        return

    widths = [max(len(row[i]) for row in rows) for i in range(3)]
    widths = [max(width, len(header)) for width, header in zip(widths, ("METHOD", "PATH", "KIND"), strict=True)]

    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "KIND", "HANDLER"))
    sep_len = sum(widths) + 6 + max(len(row[3]) for row in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
