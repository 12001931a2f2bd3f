"""Navigation transition engine.

``History`` owns the current route and drives every transition:

1. resolve the target through the router's matcher
2. bail out with ``NavigationDuplicated`` if it is the current route
3. diff the matched chains (``resolve_queue``)
4. run leave guards, ``before_each`` hooks, update guards, per-record
   ``before_enter`` guards, then lazy component resolution
5. run enter guards, then ``before_resolve`` hooks
6. commit, unless a newer navigation took over in the meantime

Each guard must call its ``next`` continuation before the queue moves
on.  Starting a navigation while another is waiting on a guard wakes
the older one, which then aborts with ``NavigationCancelled``.  Guard
bodies themselves are never interrupted.

Location backends subclass ``History`` and implement ``push``,
``replace``, ``go``, ``ensure_url``, and ``get_current_location``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from homing._internal.invoke import invoke
from homing._internal.types import (
    AbortCallback,
    CompleteCallback,
    NavigationGuard,
    RawLocation,
)
from homing.config import normalize_base
from homing.errors import (
    NavigationAborted,
    NavigationCancelled,
    NavigationDuplicated,
    NavigationFailureType,
    NavigationRedirected,
    is_navigation_failure,
)
from homing.location.normalize import Location, is_location_like
from homing.navigation.components import resolve_async_components
from homing.navigation.guards import (
    extract_enter_guards,
    extract_leave_guards,
    extract_update_guards,
)
from homing.navigation.queue import Continuation, resolve_queue, run_queue
from homing.routing.route import START, Route, is_same_route
from homing.view import handle_route_entered

if TYPE_CHECKING:
    from homing.router import Router

logger = logging.getLogger("homing.navigation")


def _wants_replace(target: Any) -> bool:
    if isinstance(target, Location):
        return target.replace
    if isinstance(target, Mapping):
        return bool(target.get("replace"))
    return False


class History:
    """Base class for location backends; holds the transition state machine.

    Usage (through a backend)::

        history = MemoryHistory(router)
        await history.push("/users/42")
        history.current.params  # {"id": "42"}
    """

    def __init__(self, router: Router, base: str | None = None) -> None:
        self.router = router
        self.base = normalize_base(base)
        self.current: Route = START
        self.pending: Route | None = None
        self.ready = False
        self.listeners: list[Callable[[], Any]] = []
        self._cb: Callable[[Route], Any] | None = None
        self._ready_cbs: list[Callable[..., Any]] = []
        self._ready_error_cbs: list[Callable[..., Any]] = []
        self._error_cbs: list[Callable[..., Any]] = []
        self._waiting: set[Continuation] = set()

    # -- Backend contract --

    async def push(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> None:
        raise NotImplementedError

    async def replace(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> None:
        raise NotImplementedError

    async def go(self, n: int) -> None:
        raise NotImplementedError

    def ensure_url(self, push: bool = False) -> None:
        raise NotImplementedError

    def get_current_location(self) -> str:
        raise NotImplementedError

    def setup_listeners(self) -> None:
        """Subscribe to environment location changes.

        Backends append an unsubscribe callable to ``self.listeners``;
        ``teardown()`` calls them.  The default has nothing to listen to.
        """

    # -- Observers --

    def listen(self, cb: Callable[[Route], Any]) -> None:
        """Set the callback notified with every committed route."""
        self._cb = cb

    async def on_ready(
        self,
        cb: Callable[..., Any],
        error_cb: Callable[..., Any] | None = None,
    ) -> None:
        """Call *cb* with the route once the first navigation commits.

        If that already happened, *cb* is called right away.  *error_cb*
        is called instead if the first navigation fails.
        """
        if self.ready:
            await invoke(cb, self.current)
            return
        self._ready_cbs.append(cb)
        if error_cb is not None:
            self._ready_error_cbs.append(error_cb)

    def on_error(self, cb: Callable[..., Any]) -> None:
        """Register a callback for errors raised during navigation."""
        self._error_cbs.append(cb)

    # -- Lifecycle --

    async def start(self) -> None:
        """Navigate to the environment's current location, then start listening."""

        def setup(_: Any) -> None:
            self.setup_listeners()

        await self.transition_to(self.get_current_location(), setup, setup)

    def teardown(self) -> None:
        """Unsubscribe listeners and return to the initial state."""
        for cleanup in self.listeners:
            cleanup()
        self.listeners = []
        self.current = START
        self.pending = None

    def update_route(self, route: Route) -> None:
        self.current = route
        if self._cb is not None:
            self._cb(route)

    # -- Transitions --

    async def transition_to(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> None:
        """Resolve *location* and try to make it the current route.

        Navigation failures are delivered to *on_abort*, never raised.
        An exception while resolving the location is sent to the error
        callbacks and re-raised.
        """
        try:
            route = self.router.match(location, self.current)
        except Exception as exc:
            for cb in list(self._error_cbs):
                await invoke(cb, exc)
            raise

        prev = self.current

        async def complete(route: Route) -> None:
            self.update_route(route)
            if on_complete is not None:
                await invoke(on_complete, route)
            self.ensure_url()
            for hook in list(self.router.after_hooks):
                await invoke(hook, route, prev)

            # first commit
            if not self.ready:
                self.ready = True
                for cb in list(self._ready_cbs):
                    await invoke(cb, route)

        async def abort(err: BaseException) -> None:
            if on_abort is not None:
                await invoke(on_abort, err)
            if err is not None and not self.ready:
                # an initial redirect is not the end of startup; the
                # navigation it starts will settle readiness
                if (
                    not is_navigation_failure(err, NavigationFailureType.REDIRECTED)
                    or prev is not START
                ):
                    self.ready = True
                    for cb in list(self._ready_error_cbs):
                        await invoke(cb, err)

        await self.confirm_transition(route, complete, abort)

    async def confirm_transition(
        self,
        route: Route,
        on_complete: CompleteCallback,
        on_abort: AbortCallback | None = None,
    ) -> None:
        """Run the guard pipeline for an already resolved *route*."""
        current = self.current
        self.pending = route
        self._supersede_waiting()

        async def abort(err: BaseException) -> None:
            if not is_navigation_failure(err):
                if self._error_cbs:
                    for cb in list(self._error_cbs):
                        await invoke(cb, err)
                else:
                    logger.error(
                        "Uncaught error during route navigation to %s",
                        route.full_path,
                        exc_info=err,
                    )
            if on_abort is not None:
                await invoke(on_abort, err)

        leaf = route.matched[-1] if route.matched else None
        current_leaf = current.matched[-1] if current.matched else None
        if (
            is_same_route(route, current)
            and len(route.matched) == len(current.matched)
            and leaf is current_leaf
        ):
            self.ensure_url()
            await abort(NavigationDuplicated(current, route))
            return

        diff = resolve_queue(current.matched, route.matched)
        resolver = self.router.config.component_resolver or resolve_async_components
        queue: list[NavigationGuard | None] = [
            *extract_leave_guards(diff.deactivated),
            *list(self.router.before_hooks),
            *extract_update_guards(diff.updated),
            *(guard for record in diff.activated for guard in record.before_enter),
            resolver(diff.activated),
        ]

        async def step(guard: NavigationGuard) -> bool:
            if self.pending is not route:
                await abort(NavigationCancelled(current, route))
                return False

            next_ = Continuation()
            self._waiting.add(next_)
            try:
                try:
                    await invoke(guard, route, current, next_)
                except Exception as exc:
                    await abort(exc)
                    return False
                to = await next_.wait()
            finally:
                self._waiting.discard(next_)

            if next_.superseded or self.pending is not route:
                await abort(NavigationCancelled(current, route))
                return False

            if to is False:
                # next(False) -> abort navigation, ensure current URL
                self.ensure_url(True)
                await abort(NavigationAborted(current, route))
                return False
            if isinstance(to, BaseException):
                self.ensure_url(True)
                await abort(to)
                return False
            if is_location_like(to):
                # next("/") or next({"path": "/"}) -> redirect
                await abort(NavigationRedirected(current, route))
                if _wants_replace(to):
                    await self.replace(to)
                else:
                    await self.push(to)
                return False
            # anything else, including a deferred enter callback, proceeds
            return True

        if not await run_queue(queue, step):
            return

        # the view components are resolved now; enter guards can be extracted
        queue = [
            *extract_enter_guards(diff.activated),
            *list(self.router.resolve_hooks),
        ]
        if not await run_queue(queue, step):
            return

        if self.pending is not route:
            await abort(NavigationCancelled(current, route))
            return
        self.pending = None
        await invoke(on_complete, route)
        handle_route_entered(route)

    def _supersede_waiting(self) -> None:
        waiting, self._waiting = self._waiting, set()
        for continuation in waiting:
            continuation.supersede()
