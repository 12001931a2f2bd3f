"""Route table — compiles route configuration into indexed lookup tables.

The table keeps three structures in sync:

* ``path_list`` — record paths in match priority order (depth-first,
  children before their parent, the ``*`` wildcard always last)
* ``path_map`` — path -> record
* ``name_map`` — route name -> record

Records can be added incrementally; they are never removed.
"""

import dataclasses
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from homing.errors import ConfigurationError
from homing.location.path import clean_path
from homing.routing.pattern import CompiledPath, PathOptions, compile_path
from homing.routing.record import (
    RouteConfig,
    RouteRecord,
    ViewGuards,
    as_guard_tuple,
    as_route_config,
)

logger = logging.getLogger("homing.routing")

WILDCARD = "*"

_DEFAULT_CHILD_RE = re.compile(r"/?")


def normalize_path(path: str, parent: RouteRecord | None = None, strict: bool = False) -> str:
    """Make *path* absolute by joining it under *parent*'s path.

    Paths starting with ``/`` are already absolute.  Unless *strict*,
    one trailing slash is dropped (so ``"/"`` becomes ``""``, the root).
    """
    if not strict:
        path = path.removesuffix("/")
    if path.startswith("/") or parent is None:
        return path
    return clean_path(f"{parent.path}/{path}")


def _record_props(config: RouteConfig) -> dict[str, Any]:
    if config.props is None:
        return {}
    if config.components is None:
        return {"default": config.props}
    if isinstance(config.props, Mapping):
        return dict(config.props)
    return dict.fromkeys(config.components, config.props)


def _record_guards(config: RouteConfig) -> dict[str, ViewGuards]:
    if config.guards is None:
        return {}
    if isinstance(config.guards, ViewGuards):
        return {"default": config.guards}
    return dict(config.guards)


class RouteTable:
    """Indexed route records.

    Usage::

        table = RouteTable.build([
            {"path": "/", "name": "home"},
            {"path": "/users/:id", "name": "user"},
            {"path": "*", "name": "notfound"},
        ])
        table.name_map["user"].path  # "/users/:id"
    """

    __slots__ = ("_debug", "name_map", "path_list", "path_map")

    def __init__(self, *, debug: bool = False) -> None:
        self._debug = debug
        self.path_list: list[str] = []
        self.path_map: dict[str, RouteRecord] = {}
        self.name_map: dict[str, RouteRecord] = {}

    @classmethod
    def build(
        cls,
        routes: Iterable[RouteConfig | Mapping[str, Any]],
        *,
        debug: bool = False,
    ) -> "RouteTable":
        """Create a table and register *routes* in declaration order."""
        table = cls(debug=debug)
        table.extend(routes)
        return table

    def extend(
        self,
        routes: Iterable[RouteConfig | Mapping[str, Any]],
        parent: RouteRecord | None = None,
    ) -> None:
        """Register more *routes*, optionally nested under *parent*."""
        for route in routes:
            self._add_record(as_route_config(route), parent)

        # wildcard routes always go last, whatever the declaration order
        wildcards = [path for path in self.path_list if path == WILDCARD]
        if wildcards:
            self.path_list[:] = [path for path in self.path_list if path != WILDCARD] + wildcards

        if self._debug:
            missing = [path for path in self.path_list if path and path[0] not in (WILDCARD, "/")]
            if missing:
                logger.warning(
                    "Non-nested routes must include a leading slash character. "
                    "Fix the following routes:\n%s",
                    "\n".join(f"- {path}" for path in missing),
                )

    def add_route(
        self,
        parent_or_route: str | RouteConfig | Mapping[str, Any],
        route: RouteConfig | Mapping[str, Any] | None = None,
    ) -> None:
        """Add one route, at the root or under the route named *parent_or_route*.

        A child added under a parent that has aliases is also reachable
        below each alias.
        """
        parent: RouteRecord | None = None
        if isinstance(parent_or_route, str):
            parent = self.name_map.get(parent_or_route)
            if parent is None:
                logger.warning(
                    "Cannot find parent route %r; adding the route at the root.",
                    parent_or_route,
                )
        config = as_route_config(route if route is not None else parent_or_route)  # type: ignore[arg-type]
        self.extend([config], parent)

        if parent is not None:
            for alias in parent.alias:
                self._add_record(
                    RouteConfig(path=alias, children=(config,)),
                    parent.parent,
                    parent.path or "/",
                )

    def get_routes(self) -> list[RouteRecord]:
        """All records in match priority order."""
        return [self.path_map[path] for path in self.path_list]

    def _compile(self, path: str, options: PathOptions) -> CompiledPath:
        compiled = compile_path(path, options)
        if self._debug:
            seen: set[str | int] = set()
            for key in compiled.keys:
                if key.name in seen:
                    logger.warning('Duplicate param keys in route with path: "%s"', path)
                seen.add(key.name)
        return compiled

    def _add_record(
        self,
        config: RouteConfig,
        parent: RouteRecord | None = None,
        match_as: str | None = None,
    ) -> None:
        path = config.path
        if isinstance(config.component, str):
            msg = (
                f'route config "component" for path: {path or config.name} cannot be a '
                "string id. Use an actual component instead."
            )
            raise ConfigurationError(msg)
        if self._debug and not path.isascii():
            logger.warning(
                'Route with path "%s" contains unencoded characters, make sure your path '
                "is correctly encoded before passing it to the router.",
                path,
            )

        options = config.path_options or PathOptions()
        normalized = normalize_path(path, parent, options.strict)
        if config.case_sensitive is not None:
            options = dataclasses.replace(options, sensitive=config.case_sensitive)

        if isinstance(config.alias, str):
            aliases: tuple[str, ...] = (config.alias,)
        else:
            aliases = tuple(config.alias or ())

        record = RouteRecord(
            path=normalized,
            regex=self._compile(normalized, options),
            components=(
                dict(config.components)
                if config.components is not None
                else {"default": config.component}
            ),
            alias=aliases,
            name=config.name,
            parent=parent,
            match_as=match_as,
            redirect=config.redirect,
            before_enter=as_guard_tuple(config.before_enter),
            meta=config.meta or {},
            props=_record_props(config),
            guards=_record_guards(config),
        )

        if config.children:
            children = [as_route_config(child) for child in config.children]
            if (
                self._debug
                and config.name
                and not config.redirect
                and any(_DEFAULT_CHILD_RE.fullmatch(child.path) for child in children)
            ):
                logger.warning(
                    "Named Route '%s' has a default child route. When navigating to this "
                    "named route, the default child route will not be rendered. Remove the "
                    "name from this route and use the name of the default child route for "
                    "named links instead.",
                    config.name,
                )
            for child in children:
                child_match_as = clean_path(f"{match_as}/{child.path}") if match_as else None
                self._add_record(child, record, child_match_as)

        if record.path not in self.path_map:
            self.path_list.append(record.path)
            self.path_map[record.path] = record

        for alias in aliases:
            if alias == path:
                logger.warning(
                    'Found an alias with the same value as the path: "%s". '
                    "You have to remove that alias. It will be ignored.",
                    path,
                )
                continue
            self._add_record(
                RouteConfig(path=alias, children=config.children),
                parent,
                record.path or "/",
            )

        if config.name:
            if config.name not in self.name_map:
                self.name_map[config.name] = record
            elif not match_as:
                logger.warning(
                    'Duplicate named routes definition: { name: "%s", path: "%s" }',
                    config.name,
                    record.path,
                )
