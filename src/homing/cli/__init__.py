"""Homing CLI — inspect a router's route table and resolve locations.

Entry point registered as ``homing`` in ``pyproject.toml``::

    [project.scripts]
    homing = "homing.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``homing`` command."""
    parser = argparse.ArgumentParser(
        prog="homing",
        description="Homing — route matching and guarded navigation.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- homing routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled routes in match order")
    routes_parser.add_argument(
        "router",
        help="Router, route list, or factory (e.g. myapp.routing:router)",
    )

    # -- homing match -----------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Resolve a location against the routes")
    match_parser.add_argument(
        "router",
        help="Router, route list, or factory (e.g. myapp.routing:router)",
    )
    match_parser.add_argument("location", help="Path to resolve (e.g. /users/42?tab=posts)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from homing.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from homing.cli._match import run_match

        run_match(args)
