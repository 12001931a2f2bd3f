"""``homing routes`` — list compiled routes.

Prints every route record in the order locations are matched against
them: children before parents, the ``*`` wildcard last.
"""

import argparse
import sys

from homing.cli._resolve import resolve_router
from homing.routing.record import RouteRecord


def _describe_redirect(record: RouteRecord) -> str:
    redirect = record.redirect
    if redirect is None:
        if record.match_as:
            return f"alias of {record.match_as}"
        return ""
    if isinstance(redirect, str):
        return f"-> {redirect}"
    if callable(redirect):
        return f"-> {getattr(redirect, '__name__', repr(redirect))}()"
    return f"-> {redirect!r}"


def run_routes(args: argparse.Namespace) -> None:
    """List compiled routes for a homing router.

    Resolves ``args.router`` to a Router instance and prints a table
    of PATH, NAME, and REDIRECT.
    """
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    records = router.get_routes()
    if not records:
        print("No routes registered.")
        return

    # Build rows: (path, name, redirect)
    rows: list[tuple[str, str, str]] = [
        (record.path or "/", record.name or "", _describe_redirect(record)) for record in records
    ]

    # Column widths
    max_path = max(max(len(r[0]) for r in rows), 4)  # "PATH" header
    max_name = max(max(len(r[1]) for r in rows), 4)  # "NAME" header

    fmt = f"{{:<{max_path}}}  {{:<{max_name}}}  {{}}"
    print(fmt.format("PATH", "NAME", "REDIRECT"))
    sep_len = max_path + max_name + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(max(sep_len, 20), 80))
    for path, name, redirect in rows:
        print(fmt.format(path, name, redirect).rstrip())
