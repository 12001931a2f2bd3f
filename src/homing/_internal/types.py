"""Shared type aliases and protocols used across homing modules."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from homing.location.normalize import Location
    from homing.routing.route import Route

# Anything the router accepts as a navigation target
RawLocation: TypeAlias = "str | Location | Mapping[str, Any]"

# Continuation handed to every guard as its third argument
Next: TypeAlias = Callable[..., None]

# Navigation guard: (to, from_, next), sync or async, return value ignored
NavigationGuard: TypeAlias = Callable[..., Any]

# After hook: (to, from_), sync or async
AfterHook: TypeAlias = Callable[..., Any]

# Navigation callbacks: on_complete(route) / on_abort(error)
CompleteCallback: TypeAlias = "Callable[[Route], Any]"
AbortCallback: TypeAlias = Callable[[BaseException], Any]


@runtime_checkable
class HistoryBackend(Protocol):
    """What a location backend must provide to drive the transition engine.

    ``push``/``replace``/``go`` start navigations and call into
    ``transition_to`` (or ``confirm_transition`` for ``go``);
    ``ensure_url`` re-affirms the committed location after an abort;
    ``setup_listeners`` wires environment change events.
    """

    current: Route

    def push(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> Awaitable[None]: ...

    def replace(
        self,
        location: RawLocation,
        on_complete: CompleteCallback | None = None,
        on_abort: AbortCallback | None = None,
    ) -> Awaitable[None]: ...

    def go(self, n: int) -> Awaitable[None]: ...
    def ensure_url(self, push: bool = False) -> None: ...
    def get_current_location(self) -> str: ...
    def setup_listeners(self) -> None: ...
