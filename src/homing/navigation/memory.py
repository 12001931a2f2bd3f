"""In-memory location backend.

Keeps its own stack of visited routes, so it works in any Python
process: servers, tests, command-line tools.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homing._internal.invoke import invoke
from homing._internal.types import AbortCallback, CompleteCallback, RawLocation
from homing.errors import NavigationFailureType, is_navigation_failure
from homing.navigation.history import History
from homing.routing.route import Route

if TYPE_CHECKING:
    from homing.router import Router


class MemoryHistory(History):
    """History backed by a list of routes and a cursor.

    ``push`` drops any forward entries; ``go`` moves the cursor and
    re-runs the guards for the route it lands on.
    """

    def __init__(self, router: Router, base: str | None = None, initial: str = "/") -> None:
        super().__init__(router, base)
        self.initial = initial
        self.stack: list[Route] = []
        self.index = -1

    async def start(self) -> None:
        await self.push(self.initial)
        self.setup_listeners()

    async def push(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> None:
        async def complete(route: Route) -> None:
            self.stack = [*self.stack[: self.index + 1], route]
            self.index += 1
            if on_complete is not None:
                await invoke(on_complete, route)

        await self.transition_to(location, complete, on_abort)

    async def replace(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> None:
        async def complete(route: Route) -> None:
            self.stack = [*self.stack[: max(self.index, 0)], route]
            self.index = len(self.stack) - 1
            if on_complete is not None:
                await invoke(on_complete, route)

        await self.transition_to(location, complete, on_abort)

    async def go(self, n: int) -> None:
        """Move *n* entries through the stack; out of range is a no-op."""
        target_index = self.index + n
        if target_index < 0 or target_index >= len(self.stack):
            return
        route = self.stack[target_index]

        async def complete(_: Route) -> None:
            prev = self.current
            self.index = target_index
            self.update_route(route)
            for hook in list(self.router.after_hooks):
                await invoke(hook, route, prev)

        def abort(err: BaseException) -> None:
            if is_navigation_failure(err, NavigationFailureType.DUPLICATED):
                self.index = target_index

        await self.confirm_transition(route, complete, abort)

    def get_current_location(self) -> str:
        if 0 <= self.index < len(self.stack):
            return self.stack[self.index].full_path
        return self.initial

    def teardown(self) -> None:
        super().teardown()
        self.stack = []
        self.index = -1

    def ensure_url(self, push: bool = False) -> None:
        # nothing outside the stack to keep in sync
        pass
