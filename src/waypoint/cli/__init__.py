"""Waypoint CLI — serve a router and inspect its route tables.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint — ordered, nestable request routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a router with uvicorn")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--debug", action="store_true", help="Include tracebacks in 500s")
    run_parser.add_argument("--log-level", default=None, help="Log level (default: info)")

    # -- waypoint routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from waypoint.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
