"""Router — the public entry point.

Wraps a ``Matcher`` (route table + resolution) and a history backend
(the transition engine) behind one object, and owns the global
navigation hooks.

Usage::

    from homing import Router

    router = Router([
        {"path": "/", "name": "home", "component": Home},
        {"path": "/users/:id", "name": "user", "component": UserPage},
    ])

    def require_login(to, from_, next):
        next(None if session.user else "/login")

    router.before_each(require_login)

    await router.init()
    route = await router.push({"name": "user", "params": {"id": "42"}})
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from homing._internal.types import (
    AbortCallback,
    AfterHook,
    CompleteCallback,
    NavigationGuard,
    RawLocation,
)
from homing.config import RouterConfig
from homing.location.normalize import Location, normalize_location
from homing.location.path import clean_path
from homing.navigation.history import History
from homing.navigation.memory import MemoryHistory
from homing.routing.matcher import Matcher
from homing.routing.record import RouteConfig, RouteRecord
from homing.routing.route import START, Route

HistoryFactory = Callable[["Router"], History]


@dataclass(frozen=True, slots=True)
class Resolved:
    """Result of ``Router.resolve``: the normalized location, its route, and its href."""

    location: Location
    route: Route
    href: str


def create_href(base: str, full_path: str, mode: str) -> str:
    """Format *full_path* as an href under *base* (``#``-prefixed in hash mode)."""
    path = f"#{full_path}" if mode == "hash" else full_path
    return clean_path(f"{base}/{path}") if base else path


def _register_hook(hooks: list[Any], fn: Any) -> Callable[[], None]:
    hooks.append(fn)

    def unregister() -> None:
        if fn in hooks:
            hooks.remove(fn)

    return unregister


class _Outcome:
    """Collects the result of one navigation for callers that await it."""

    __slots__ = ("error", "route")

    def __init__(self) -> None:
        self.route: Route | None = None
        self.error: BaseException | None = None

    def complete(self, route: Route) -> None:
        self.route = route

    def abort(self, err: BaseException) -> None:
        self.error = err

    def result(self) -> Route | None:
        if self.error is not None:
            raise self.error
        return self.route


class Router:
    """Route table, matcher, history backend, and global hooks in one place."""

    def __init__(
        self,
        routes: Iterable[RouteConfig | Mapping[str, Any]] = (),
        config: RouterConfig | None = None,
        *,
        history: HistoryFactory | None = None,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.apps: list[Any] = []
        self.before_hooks: list[NavigationGuard] = []
        self.resolve_hooks: list[NavigationGuard] = []
        self.after_hooks: list[AfterHook] = []
        self._listeners: list[Callable[[Route], Any]] = []
        self._initialized = False
        self.matcher = Matcher(routes, self.config)
        if history is not None:
            self.history: History = history(self)
        else:
            self.history = MemoryHistory(self, self.config.base, self.config.initial_location)
        self.history.listen(self._notify)

    @property
    def mode(self) -> str:
        return self.config.mode

    @property
    def app(self) -> Any:
        """The first app the router was initialized with."""
        return self.apps[0] if self.apps else None

    @property
    def current_route(self) -> Route:
        return self.history.current

    # -- Resolution --

    def match(
        self,
        raw: RawLocation,
        current: Route | None = None,
        redirected_from: Location | None = None,
    ) -> Route:
        return self.matcher.match(raw, current, redirected_from)

    def resolve(
        self,
        to: RawLocation,
        current: Route | None = None,
        append: bool = False,
    ) -> Resolved:
        """Resolve *to* without navigating.

        The href points at the location as requested, before any
        route-config redirect.
        """
        current = current or self.history.current
        location = normalize_location(to, current, append, self.config.parse_query)
        route = self.match(location, current)
        full_path = route.redirected_from or route.full_path
        href = create_href(self.history.base, full_path, self.config.mode)
        return Resolved(location=location, route=route, href=href)

    def get_matched_components(self, to: Route | RawLocation | None = None) -> list[Any]:
        """Components of every record matched by *to* (default: the current route)."""
        if to is None:
            route = self.current_route
        elif isinstance(to, Route):
            route = to
        else:
            route = self.resolve(to).route
        return [component for record in route.matched for component in record.components.values()]

    # -- Lifecycle --

    async def init(self, app: Any = None) -> None:
        """Attach *app* and, the first time, perform the initial navigation."""
        if app is not None:
            self.apps.append(app)
        if self._initialized:
            return
        self._initialized = True
        await self.history.start()

    def teardown(self, app: Any = None) -> None:
        """Detach *app*; once no app is left, reset the history."""
        if app is not None and app in self.apps:
            self.apps.remove(app)
        if not self.apps:
            self.history.teardown()
            self._initialized = False

    def listen(self, cb: Callable[[Route], Any]) -> Callable[[], None]:
        """Call *cb* with each committed route.  Returns an unregister function."""
        return _register_hook(self._listeners, cb)

    def _notify(self, route: Route) -> None:
        for cb in list(self._listeners):
            cb(route)

    # -- Hooks --

    def before_each(self, guard: NavigationGuard) -> Callable[[], None]:
        """Run *guard* before every navigation, after leave guards."""
        return _register_hook(self.before_hooks, guard)

    def before_resolve(self, guard: NavigationGuard) -> Callable[[], None]:
        """Run *guard* after enter guards and lazy component loading."""
        return _register_hook(self.resolve_hooks, guard)

    def after_each(self, hook: AfterHook) -> Callable[[], None]:
        """Call ``hook(to, from_)`` after every committed navigation."""
        return _register_hook(self.after_hooks, hook)

    async def on_ready(
        self,
        cb: Callable[..., Any],
        error_cb: Callable[..., Any] | None = None,
    ) -> None:
        await self.history.on_ready(cb, error_cb)

    def on_error(self, cb: Callable[..., Any]) -> None:
        self.history.on_error(cb)

    # -- Navigation --

    async def push(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> Route | None:
        """Navigate to *location*, adding a history entry.

        With callbacks, the outcome goes to them.  Without, returns the
        committed route or raises the ``NavigationFailure`` (or guard
        error) that stopped it.
        """
        if on_complete is not None or on_abort is not None:
            await self.history.push(location, on_complete, on_abort)
            return None
        outcome = _Outcome()
        await self.history.push(location, outcome.complete, outcome.abort)
        return outcome.result()

    async def replace(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> Route | None:
        """Like ``push``, but replaces the current history entry."""
        if on_complete is not None or on_abort is not None:
            await self.history.replace(location, on_complete, on_abort)
            return None
        outcome = _Outcome()
        await self.history.replace(location, outcome.complete, outcome.abort)
        return outcome.result()

    async def go(self, n: int) -> None:
        await self.history.go(n)

    async def back(self) -> None:
        await self.go(-1)

    async def forward(self) -> None:
        await self.go(1)

    # -- Dynamic routes --

    def get_routes(self) -> list[RouteRecord]:
        return self.matcher.get_routes()

    async def add_route(
        self,
        parent_or_route: str | RouteConfig | Mapping[str, Any],
        route: RouteConfig | Mapping[str, Any] | None = None,
    ) -> None:
        """Add a route (under the named parent, if given).

        If the router has already navigated, the current location is
        re-resolved against the extended table.
        """
        self.matcher.add_route(parent_or_route, route)
        await self._refresh()

    async def add_routes(self, routes: Iterable[RouteConfig | Mapping[str, Any]]) -> None:
        self.matcher.add_routes(routes)
        await self._refresh()

    async def _refresh(self) -> None:
        if self.history.current is not START:
            await self.history.transition_to(self.history.get_current_location())
