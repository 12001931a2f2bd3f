"""Lazy view component resolution.

The last entry of a transition's first guard queue.  Every
``LazyComponent`` referenced by an activated record is loaded
concurrently; the loaded component replaces the lazy one in the
record, so each factory runs once per record.
"""

import logging
from collections.abc import Sequence
from typing import Any

import anyio

from homing._internal.invoke import invoke
from homing._internal.types import NavigationGuard, Next
from homing.routing.record import LazyComponent, RouteRecord
from homing.routing.route import Route

logger = logging.getLogger("homing.navigation")


def resolve_async_components(records: Sequence[RouteRecord]) -> NavigationGuard:
    """Return a guard that loads the lazy components of *records*.

    The guard calls ``next()`` once everything has loaded, or
    ``next(error)`` with the first factory failure.  A failure cancels
    the factories still loading.
    """

    async def resolve_components(to: Route, from_: Route, next_: Next) -> None:
        pending = [
            (record, slot, component)
            for record in records
            for slot, component in record.components.items()
            if isinstance(component, LazyComponent)
        ]
        if not pending:
            next_()
            return

        errors: list[Exception] = []

        async def _load(record: RouteRecord, slot: str, lazy: LazyComponent) -> None:
            try:
                component: Any = await invoke(lazy.factory)
            except Exception as exc:
                logger.warning("Failed to resolve async component %s: %s", slot, exc)
                errors.append(exc)
                # the first failure decides the navigation
                tg.cancel_scope.cancel()
                return
            # a concurrent navigation may have loaded it already
            if record.components.get(slot) is lazy:
                record.components[slot] = component

        async with anyio.create_task_group() as tg:
            for record, slot, lazy in pending:
                tg.start_soon(_load, record, slot, lazy)

        next_(errors[0] if errors else None)

    return resolve_components
