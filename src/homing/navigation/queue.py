"""Guard queue primitives: the chain diff, the ``next`` continuation, the runner.

A transition compares the matched chains of the current and target
routes.  The shared prefix is *updated*, the target's remaining records
are *activated*, and the current route's remaining records are
*deactivated*::

    current: A -> B -> C
    target:  A -> B -> D
    resolve_queue(...)  # updated=(A, B), activated=(D,), deactivated=(C,)
"""

from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, NamedTuple

import anyio

from homing._internal.types import NavigationGuard
from homing.routing.record import RouteRecord


class QueueDiff(NamedTuple):
    """Records touched by a transition, split by what happens to them."""

    updated: tuple[RouteRecord, ...]
    activated: tuple[RouteRecord, ...]
    deactivated: tuple[RouteRecord, ...]


def resolve_queue(
    current: Sequence[RouteRecord],
    target: Sequence[RouteRecord],
) -> QueueDiff:
    """Split two matched chains at the first index where records differ."""
    limit = min(len(current), len(target))
    index = 0
    while index < limit and current[index] is target[index]:
        index += 1
    return QueueDiff(
        updated=tuple(target[:index]),
        activated=tuple(target[index:]),
        deactivated=tuple(current[index:]),
    )


class Continuation:
    """The ``next`` callable handed to a guard.

    Calling it records the guard's verdict and wakes the engine.  Only the
    value present when the engine reads it counts, so when a guard calls
    ``next`` more than once before yielding, the last call wins.
    ``supersede()`` wakes the engine without a verdict; the engine then
    abandons the transition.
    """

    __slots__ = ("_event", "called", "superseded", "value")

    def __init__(self) -> None:
        self._event = anyio.Event()
        self.value: Any = None
        self.called = False
        self.superseded = False

    def __call__(self, value: Any = None) -> None:
        self.value = value
        self.called = True
        self._event.set()

    def supersede(self) -> None:
        self.superseded = True
        self._event.set()

    async def wait(self) -> Any:
        await self._event.wait()
        return self.value

    def __repr__(self) -> str:
        state = "superseded" if self.superseded else "called" if self.called else "waiting"
        return f"<Continuation {state}>"


async def run_queue(
    queue: Iterable[NavigationGuard | None],
    step: Callable[[NavigationGuard], Awaitable[bool]],
) -> bool:
    """Feed each guard in *queue* to *step*, one at a time.

    ``None`` entries are skipped.  Stops at the first guard for which
    *step* returns ``False``.  Returns ``True`` if the whole queue ran.
    """
    for guard in queue:
        if guard is None:
            continue
        if not await step(guard):
            return False
    return True
