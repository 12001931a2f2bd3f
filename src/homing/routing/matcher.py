"""Matcher — resolves raw locations into routes against a route table.

Follows route-config redirects and aliases recursively.  Redirect
chains are not checked for cycles: mutually redirecting routes recurse
until Python raises ``RecursionError``.
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from homing._internal.types import RawLocation
from homing.config import RouterConfig
from homing.errors import ConfigurationError
from homing.location.normalize import Location, normalize_location
from homing.location.path import resolve_path
from homing.location.query import decode
from homing.routing.params import PATH_MATCH, fill_params
from homing.routing.pattern import CompiledPath
from homing.routing.record import RouteConfig, RouteRecord
from homing.routing.route import Route, create_route
from homing.routing.table import RouteTable

logger = logging.getLogger("homing.routing")

_REDIRECT_OVERRIDES = ("query", "hash", "params")


def match_route(regex: CompiledPath, path: str, params: dict[str, Any]) -> bool:
    """Test *path* against *regex*, storing decoded captures into *params*.

    Unnamed captures are stored under their index; index ``0`` (the
    bare ``*`` wildcard) is stored as ``pathMatch``.
    """
    m = regex.match(path)
    if m is None:
        return False

    for key, value in zip(regex.keys, m.groups(), strict=False):
        if value is None:
            continue
        name = key.name or PATH_MATCH
        params[str(name)] = decode(value)
    return True


class Matcher:
    """Route matching engine.

    Usage::

        matcher = Matcher([{"path": "/users/:id", "name": "user"}])
        route = matcher.match("/users/42")
        route.params  # {"id": "42"}
        matcher.match({"name": "user", "params": {"id": "7"}}).full_path  # "/users/7"
    """

    __slots__ = ("_config", "_table")

    def __init__(
        self,
        routes: Iterable[RouteConfig | Mapping[str, Any]] = (),
        config: RouterConfig | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._table = RouteTable.build(routes, debug=self._config.debug)

    @property
    def table(self) -> RouteTable:
        return self._table

    def add_routes(self, routes: Iterable[RouteConfig | Mapping[str, Any]]) -> None:
        self._table.extend(routes)

    def add_route(
        self,
        parent_or_route: str | RouteConfig | Mapping[str, Any],
        route: RouteConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self._table.add_route(parent_or_route, route)

    def get_routes(self) -> list[RouteRecord]:
        return self._table.get_routes()

    def match(
        self,
        raw: RawLocation,
        current: Route | None = None,
        redirected_from: Location | None = None,
    ) -> Route:
        """Resolve *raw* into a ``Route``.

        Nothing matching is not an error: the route comes back with an
        empty ``matched`` chain.
        """
        # private copy: the steps below fill in params and path
        location = dataclasses.replace(
            normalize_location(raw, current, False, self._config.parse_query)
        )
        name = location.name

        if name:
            record = self._table.name_map.get(name)
            if record is None:
                logger.warning("Route with name '%s' does not exist", name)
                return self._create_route(None, location)

            param_names = [key.name for key in record.regex.keys if not key.optional]
            params = dict(location.params) if isinstance(location.params, Mapping) else {}
            if current is not None:
                for key, value in current.params.items():
                    if key not in params and key in param_names:
                        params[key] = value

            location.params = params
            location.path = fill_params(record.path, params, f'named route "{name}"')
            return self._create_route(record, location, redirected_from)

        if location.path:
            location.params = {}
            for path in self._table.path_list:
                record = self._table.path_map[path]
                if match_route(record.regex, location.path, location.params):
                    return self._create_route(record, location, redirected_from)

        return self._create_route(None, location)

    def _redirect(self, record: RouteRecord, location: Location) -> Route:
        original = record.redirect
        if callable(original):
            original = original(create_route(record, location, None, self._config.stringify_query))

        if isinstance(original, str):
            target: Location | None = Location(path=original)
            explicit: set[str] = set()
        elif isinstance(original, Mapping):
            target = Location.from_raw(original)
            explicit = set(original)
        elif isinstance(original, Location):
            target = original
            explicit = {field for field in _REDIRECT_OVERRIDES if getattr(original, field) is not None}
        else:
            target = None
            explicit = set()

        if target is None:
            logger.warning("invalid redirect option: %r", original)
            return self._create_route(None, location)

        query = target.query if "query" in explicit else location.query
        hash_ = target.hash if "hash" in explicit else location.hash
        params = target.params if "params" in explicit else location.params

        if target.name:
            if target.name not in self._table.name_map:
                msg = f'redirect failed: named route "{target.name}" not found.'
                raise ConfigurationError(msg)
            return self.match(
                Location(name=target.name, query=query, hash=hash_, params=params, normalized=True),
                None,
                location,
            )

        if not target.path:
            logger.warning("invalid redirect option: %r", original)
            return self._create_route(None, location)

        # 1. resolve relative redirect
        raw_path = resolve_path(target.path, record.parent.path if record.parent else "/", True)
        # 2. resolve params
        resolved_path = fill_params(raw_path, params, f'redirect route with path "{raw_path}"')
        # 3. rematch with existing query and hash
        return self.match(
            Location(path=resolved_path, query=query, hash=hash_, normalized=True),
            None,
            location,
        )

    def _alias(self, location: Location, match_as: str) -> Route:
        aliased_path = fill_params(match_as, location.params, f'aliased route with path "{match_as}"')
        aliased = self.match(Location(path=aliased_path, normalized=True))
        aliased_record = aliased.matched[-1] if aliased.matched else None
        location.params = aliased.params
        return self._create_route(aliased_record, location)

    def _create_route(
        self,
        record: RouteRecord | None,
        location: Location,
        redirected_from: Location | None = None,
    ) -> Route:
        if record is not None and record.redirect is not None:
            return self._redirect(record, redirected_from or location)
        if record is not None and record.match_as:
            return self._alias(location, record.match_as)
        return create_route(record, location, redirected_from, self._config.stringify_query)
