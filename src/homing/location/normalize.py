"""Location normalization.

Every navigation target — a string, a partial mapping, a ``Location`` —
is turned into one canonical shape before matching: either name-based
(``name`` + ``params``) or an absolute ``path`` with parsed ``query``
and a ``#``-prefixed ``hash``.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from homing.location.path import parse_path, resolve_path
from homing.location.query import resolve_query
from homing.routing.params import fill_params

if TYPE_CHECKING:
    from homing._internal.types import RawLocation
    from homing.routing.route import Route

logger = logging.getLogger("homing.location")


@dataclass(slots=True)
class Location:
    """A navigation target, raw or normalized.

    Transient: built per navigation, never stored on a route.
    """

    path: str | None = None
    name: str | None = None
    params: dict[str, Any] | None = None
    query: dict[str, Any] | None = None
    hash: str | None = None
    append: bool = False
    replace: bool = False
    normalized: bool = False

    @classmethod
    def from_raw(cls, raw: RawLocation) -> Location:
        """Coerce a string, mapping, or ``Location`` into a ``Location``.

        Raises ``TypeError`` for anything else and ``ValueError`` for
        mapping keys a location does not have.
        """
        if isinstance(raw, Location):
            return raw
        if isinstance(raw, str):
            return cls(path=raw)
        if isinstance(raw, Mapping):
            known = {f.name for f in dataclasses.fields(cls)}
            unknown = set(raw) - known
            if unknown:
                msg = f"Unknown location keys: {', '.join(sorted(unknown))}"
                raise ValueError(msg)
            return cls(**raw)
        msg = f"Cannot navigate to a {type(raw).__name__}"
        raise TypeError(msg)


def is_location_like(value: object) -> bool:
    """Return ``True`` if *value* can be used as a redirect target."""
    if isinstance(value, str):
        return True
    if isinstance(value, Location):
        return isinstance(value.path, str) or isinstance(value.name, str)
    if isinstance(value, Mapping):
        return isinstance(value.get("path"), str) or isinstance(value.get("name"), str)
    return False


def normalize_location(
    raw: RawLocation,
    current: Route | None = None,
    append: bool = False,
    parse_query: Callable[[str], dict[str, Any]] | None = None,
) -> Location:
    """Normalize *raw* against the *current* route.

    * Named targets are copied and returned as-is; the matcher resolves them.
    * A target with ``params`` but no ``path`` is relative to *current*:
      its params are merged over ``current.params`` and either the current
      route name is reused or the deepest matched template is refilled.
    * Otherwise the path is split, resolved against ``current.path``
      (``.``/``..``/``append`` as a filesystem would), the embedded query
      is merged with the explicit one (explicit wins), and the hash gets
      its ``#``.
    """
    target = Location.from_raw(raw)
    if target.normalized:
        return target

    if target.name:
        return dataclasses.replace(
            target,
            params=dict(target.params) if target.params else target.params,
        )

    # relative params
    if not target.path and target.params and current is not None:
        params = {**current.params, **target.params}
        relative = dataclasses.replace(target, normalized=True)
        if current.name:
            relative.name = current.name
            relative.params = params
        elif current.matched:
            raw_path = current.matched[-1].path
            relative.path = fill_params(raw_path, params, f"path {current.path}")
        else:
            logger.warning("relative params navigation requires a current route.")
        return relative

    parsed = parse_path(target.path or "")
    base_path = (current.path if current is not None else None) or "/"
    path = resolve_path(parsed.path, base_path, append or target.append) if parsed.path else base_path

    query = resolve_query(parsed.query, target.query, parse_query)

    hash_ = target.hash or parsed.hash
    if hash_ and not hash_.startswith("#"):
        hash_ = f"#{hash_}"

    return Location(path=path, query=query, hash=hash_, normalized=True)
