"""Route — the immutable result of resolving a location.

Also home to the route comparison helpers the transition engine and
render adapters rely on.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from homing.location.query import clone_query, stringify_query
from homing.routing.record import RouteRecord

if TYPE_CHECKING:
    from homing.location.normalize import Location

QueryStringifier = Callable[[Mapping[str, Any]], str]


@dataclass(frozen=True, slots=True, eq=False)
class Route:
    """A fully resolved location.

    ``matched`` runs from the root ancestor record to the deepest
    matched record; it is empty for a location nothing matched.
    Routes compare by identity; use ``is_same_route`` for value
    comparison.
    """

    path: str
    full_path: str
    name: str | None = None
    hash: str = ""
    query: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    matched: tuple[RouteRecord, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
    redirected_from: str | None = None

    def __repr__(self) -> str:
        return f"Route({self.full_path!r}, name={self.name!r})"


def get_full_path(
    path: str | None,
    query: Mapping[str, Any] | None = None,
    hash_: str | None = None,
    stringify: QueryStringifier | None = None,
) -> str:
    """Join path, serialized query, and hash."""
    serialize = stringify or stringify_query
    return (path or "/") + serialize(query or {}) + (hash_ or "")


def format_match(record: RouteRecord | None) -> tuple[RouteRecord, ...]:
    """Walk ``parent`` links to build the root-to-leaf matched chain."""
    chain: list[RouteRecord] = []
    while record is not None:
        chain.append(record)
        record = record.parent
    chain.reverse()
    return tuple(chain)


def create_route(
    record: RouteRecord | None,
    location: Location,
    redirected_from: Location | None = None,
    stringify: QueryStringifier | None = None,
) -> Route:
    """Build the ``Route`` for *location* matched to *record* (or nothing)."""
    query = clone_query(location.query or {})
    return Route(
        name=location.name or (record.name if record is not None else None),
        meta=record.meta if record is not None else {},
        path=location.path or "/",
        hash=location.hash or "",
        query=query,
        params=dict(location.params or {}),
        full_path=get_full_path(location.path, location.query, location.hash, stringify),
        matched=format_match(record),
        redirected_from=(
            get_full_path(
                redirected_from.path,
                redirected_from.query,
                redirected_from.hash,
                stringify,
            )
            if redirected_from is not None
            else None
        ),
    )


def _strip_trailing_slash(path: str) -> str:
    return path.removesuffix("/")


def _values_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is b
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return is_object_equal(a, b)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(_values_equal(x, y) for x, y in zip(a, b, strict=True))
    return str(a) == str(b)


def is_object_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    """Compare two query/param mappings by key set and stringified values."""
    a = {} if a is None else a
    b = {} if b is None else b
    if sorted(a) != sorted(b):
        return False
    return all(_values_equal(a[key], b[key]) for key in a)


def is_same_route(a: Route, b: Route | None, only_path: bool = False) -> bool:
    """Return ``True`` if *a* and *b* point at the same location.

    Compares paths (trailing slash insensitive), then hash and query
    unless *only_path*.  ``START`` is only ever the same as itself.
    """
    if b is START:
        return a is b
    if b is None:
        return False
    if a.path and b.path:
        return _strip_trailing_slash(a.path) == _strip_trailing_slash(b.path) and (
            only_path or (a.hash == b.hash and is_object_equal(a.query, b.query))
        )
    if a.name and b.name:
        return a.name == b.name and (
            only_path
            or (
                a.hash == b.hash
                and is_object_equal(a.query, b.query)
                and is_object_equal(a.params, b.params)
            )
        )
    return False


def is_included_route(current: Route, target: Route) -> bool:
    """Return ``True`` if *target* is *current* or one of its ancestors.

    Used by link adapters for "active" styling: the target path must be a
    prefix of the current path, its hash (if any) must match, and every
    target query key must be present on the current route.
    """
    current_path = _strip_trailing_slash(current.path) + "/"
    target_path = _strip_trailing_slash(target.path) + "/"
    return (
        current_path.startswith(target_path)
        and (not target.hash or current.hash == target.hash)
        and all(key in current.query for key in target.query)
    )


def _start() -> Route:
    from homing.location.normalize import Location

    return create_route(None, Location(path="/"))


# The route that stands for "nowhere": the current route before the first commit
START: Route = _start()
