"""Haws CLI — serve an app, list its routes, validate its setup.

Entry point registered as ``haws`` in ``pyproject.toml``::

    [project.scripts]
    haws = "haws.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``haws`` command."""
    parser = argparse.ArgumentParser(
        prog="haws",
        description="haws — a tiny HTTP server that maps request lines to handlers.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- haws run ---------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging level (defaults to the app config)",
    )

    # -- haws routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    # -- haws check -------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the route table")
    check_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from haws.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from haws.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from haws.cli._check import run_check

        run_check(args)
