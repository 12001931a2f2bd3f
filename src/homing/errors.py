"""Homing exception hierarchy.

Shared across the route table, matcher, and transition engine so every
module raises and catches the same types.

Navigation failures are *control-flow* outcomes, not crashes: a guard
vetoed the navigation, a newer navigation superseded it, a guard
redirected it, or the target was already the current route.  Each one
carries a stable ``type`` discriminant plus the ``to``/``from_`` route
pair so callers can pattern-match on the failure kind.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from homing.routing.route import Route


class HomingError(Exception):
    """Base for all homing-specific errors."""


class ConfigurationError(HomingError):
    """Raised when route configuration is invalid.

    Typically raised while the route table is being built.
    """


class MissingParam(HomingError, ValueError):  # noqa: N818
    """A path template could not be filled from the given params."""


class NavigationFailureType(IntEnum):
    """Stable discriminant for the four navigation failure kinds."""

    REDIRECTED = 2
    ABORTED = 4
    CANCELLED = 8
    DUPLICATED = 16


class NavigationFailure(HomingError):
    """A navigation that did not commit.

    Attributes:
        type: Which kind of failure this is.
        to: The route the navigation was heading to.
        from_: The route that was current when the navigation started.
    """

    type: NavigationFailureType

    def __init__(self, from_: Route, to: Route, message: str) -> None:
        super().__init__(message)
        self.from_ = from_
        self.to = to
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NavigationRedirected(NavigationFailure):
    """A navigation guard diverted the navigation elsewhere."""

    type = NavigationFailureType.REDIRECTED

    def __init__(self, from_: Route, to: Route) -> None:
        super().__init__(
            from_,
            to,
            f'Redirected when going from "{from_.full_path}" to '
            f'"{to.full_path}" via a navigation guard.',
        )


class NavigationAborted(NavigationFailure):
    """A navigation guard vetoed the navigation with ``next(False)``."""

    type = NavigationFailureType.ABORTED

    def __init__(self, from_: Route, to: Route) -> None:
        super().__init__(
            from_,
            to,
            f'Navigation aborted from "{from_.full_path}" to '
            f'"{to.full_path}" via a navigation guard.',
        )


class NavigationCancelled(NavigationFailure):
    """A newer navigation started before this one could commit."""

    type = NavigationFailureType.CANCELLED

    def __init__(self, from_: Route, to: Route) -> None:
        super().__init__(
            from_,
            to,
            f'Navigation cancelled from "{from_.full_path}" to '
            f'"{to.full_path}" with a new navigation.',
        )


class NavigationDuplicated(NavigationFailure):
    """The target route is the route that is already current."""

    type = NavigationFailureType.DUPLICATED

    def __init__(self, from_: Route, to: Route) -> None:
        super().__init__(
            from_,
            to,
            f'Avoided redundant navigation to current location: "{from_.full_path}".',
        )


def is_navigation_failure(
    err: object,
    failure_type: NavigationFailureType | None = None,
) -> bool:
    """Return ``True`` if *err* is a navigation failure (of *failure_type*)."""
    if not isinstance(err, NavigationFailure):
        return False
    return failure_type is None or err.type == failure_type
