"""In-view guard extraction.

Each record declares its per-slot guards up front (``ViewGuards``).  At
transition time they are bound to what the slot currently holds:

* leave/update guards get the mounted instance as their first argument
  and are dropped for slots with nothing mounted
* enter guards run before any instance exists; a callable passed to
  their ``next`` is parked on the record until the view mounts
"""

from collections.abc import Callable, Iterable, Sequence
from functools import partial, wraps
from typing import Any

from homing._internal.types import NavigationGuard, Next
from homing.routing.record import RouteRecord, as_guard_tuple
from homing.routing.route import Route

# (guard, instance, record, slot) -> bound guard, or None to drop it
GuardBinder = Callable[[NavigationGuard, Any, RouteRecord, str], NavigationGuard | None]


def flatten_guards(groups: Iterable[Sequence[NavigationGuard]]) -> list[NavigationGuard]:
    return [guard for group in groups for guard in group]


def bind_guard(
    guard: NavigationGuard,
    instance: Any,
    record: RouteRecord,
    slot: str,
) -> NavigationGuard | None:
    """Bind *guard* to the instance mounted in *slot*, or drop it."""
    if instance is None:
        return None
    return partial(guard, instance)


def bind_enter_guard(
    guard: NavigationGuard,
    instance: Any,
    record: RouteRecord,
    slot: str,
) -> NavigationGuard:
    """Wrap an enter guard so callables given to ``next`` are deferred.

    The deferred callable lands in ``record.entered_cbs[slot]`` and runs
    with the view instance once one is mounted in that slot.
    """

    @wraps(guard)
    def route_enter_guard(to: Route, from_: Route, next_: Next) -> Any:
        def deferring_next(value: Any = None) -> None:
            if callable(value):
                record.entered_cbs.setdefault(slot, []).append(value)
            next_(value)

        return guard(to, from_, deferring_next)

    return route_enter_guard


def _extract(
    records: Iterable[RouteRecord],
    lifecycle: str,
    bind: GuardBinder,
    reverse: bool = False,
) -> list[NavigationGuard]:
    groups: list[list[NavigationGuard]] = []
    for record in records:
        for slot, view_guards in record.guards.items():
            bound = [
                bound_guard
                for guard in as_guard_tuple(getattr(view_guards, lifecycle))
                if (bound_guard := bind(guard, record.instances.get(slot), record, slot))
                is not None
            ]
            if bound:
                groups.append(bound)
    if reverse:
        groups.reverse()
    return flatten_guards(groups)


def extract_leave_guards(deactivated: Sequence[RouteRecord]) -> list[NavigationGuard]:
    """Leave guards of *deactivated*, leaf record first."""
    return _extract(deactivated, "before_route_leave", bind_guard, reverse=True)


def extract_update_guards(updated: Sequence[RouteRecord]) -> list[NavigationGuard]:
    """Update guards of *updated*, root record first."""
    return _extract(updated, "before_route_update", bind_guard)


def extract_enter_guards(activated: Sequence[RouteRecord]) -> list[NavigationGuard]:
    """Enter guards of *activated*, root record first."""
    return _extract(activated, "before_route_enter", bind_enter_guard)
