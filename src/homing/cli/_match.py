"""``homing match`` — resolve one location and print the resulting route."""

import argparse
import sys

from homing.cli._resolve import resolve_router
from homing.errors import ConfigurationError


def run_match(args: argparse.Namespace) -> None:
    """Resolve ``args.location`` against ``args.router`` and print the route.

    Exits with status 1 when the router cannot be loaded, resolution
    fails, or nothing matches.
    """
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        route = router.match(args.location)
    except (ConfigurationError, RecursionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not route.matched:
        print(f"No route matches {args.location!r}.", file=sys.stderr)
        raise SystemExit(1)

    print(f"full path:  {route.full_path}")
    print(f"name:       {route.name or '-'}")
    if route.redirected_from:
        print(f"redirected: {route.redirected_from}")
    if route.params:
        params = ", ".join(f"{key}={value!r}" for key, value in route.params.items())
        print(f"params:     {params}")
    if route.query:
        query = ", ".join(f"{key}={value!r}" for key, value in route.query.items())
        print(f"query:      {query}")
    print("matched:")
    for depth, record in enumerate(route.matched):
        print(f"  {'  ' * depth}{record.path or '/'}")
