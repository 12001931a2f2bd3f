"""View seam for render adapters.

A render adapter places one ``RouterView`` per nesting level and slot.
It asks the view what to render for the current route, and reports
mounted instances back so in-view guards can be bound and deferred
enter callbacks can run.  Nothing here renders anything.

Usage::

    outer = RouterView()                # matched[0], "default" slot
    inner = RouterView(depth=1)         # matched[1]
    sidebar = RouterView("sidebar", depth=1)

    match = inner.resolve(router.current_route)
    if match is not None:
        instance = build(match.component, **(match.props or {}))
        inner.mount(router.current_route, instance)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from homing.routing.record import RouteRecord
from homing.routing.route import Route

logger = logging.getLogger("homing.view")


@dataclass(frozen=True, slots=True)
class ViewMatch:
    """What a view renders for one route."""

    record: RouteRecord
    component: Any
    props: Any = None


def resolve_props(route: Route, config: Any) -> Any:
    """Turn a record's props config into the props for its component.

    ``True`` passes the route params, a mapping passes itself, and a
    callable is called with the route.
    """
    if config is None:
        return None
    if isinstance(config, bool):
        return route.params if config else None
    if isinstance(config, Mapping):
        return config
    if callable(config):
        return config(route)
    logger.warning(
        'props in "%s" is a %s, expecting an object, function or boolean.',
        route.path,
        type(config).__name__,
    )
    return None


def handle_route_entered(route: Route) -> None:
    """Flush deferred enter callbacks for every slot with a mounted instance.

    Each callback runs once, with the instance, and is then discarded.
    """
    for record in route.matched:
        for slot, instance in list(record.instances.items()):
            if instance is None or slot not in record.entered_cbs:
                continue
            callbacks = record.entered_cbs.pop(slot)
            for callback in callbacks:
                callback(instance)


class RouterView:
    """One view slot at one nesting depth."""

    __slots__ = ("depth", "name")

    def __init__(self, name: str = "default", depth: int = 0) -> None:
        self.name = name
        self.depth = depth

    def record_for(self, route: Route) -> RouteRecord | None:
        if self.depth < len(route.matched):
            return route.matched[self.depth]
        return None

    def resolve(self, route: Route) -> ViewMatch | None:
        """What to render for *route*, or ``None`` for an empty view."""
        record = self.record_for(route)
        if record is None:
            return None
        component = record.components.get(self.name)
        if component is None:
            return None
        return ViewMatch(
            record=record,
            component=component,
            props=resolve_props(route, record.props.get(self.name)),
        )

    def mount(self, route: Route, instance: Any) -> None:
        """Register *instance* as mounted in this slot and flush enter callbacks."""
        record = self.record_for(route)
        if record is None:
            return
        record.instances[self.name] = instance
        handle_route_entered(route)

    def unmount(self, route: Route, instance: Any) -> None:
        """Forget *instance*, if it is still the one mounted here."""
        record = self.record_for(route)
        if record is not None and record.instances.get(self.name) is instance:
            del record.instances[self.name]

    def __repr__(self) -> str:
        return f"RouterView({self.name!r}, depth={self.depth})"
