"""``waypoint run`` — serve a router with uvicorn."""

import argparse
import sys
from dataclasses import replace

from waypoint.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it.

    CLI flags override the app's ``ServerConfig``.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    overrides: dict[str, object] = {}
    if args.debug:
        overrides["debug"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        app.config = replace(app.config, **overrides)

    app.run(args.host, args.port)
