"""Guard recorder — a configurable navigation guard that logs its calls."""

from dataclasses import dataclass, field
from typing import Any

from homing._internal.types import Next
from homing.routing.route import Route


@dataclass(frozen=True, slots=True)
class GuardCall:
    """One recorded guard invocation."""

    label: str
    to: Route
    from_: Route


@dataclass(slots=True)
class GuardRecorder:
    """Hands out guards that record each call and then call ``next``.

    All guards from one recorder share a call log, so the order of
    guards across a whole transition can be checked::

        recorder = GuardRecorder()
        router.before_each(recorder.guard("global"))
        router.before_each(recorder.guard("veto", verdict=False))

        await router.push("/admin")  # raises NavigationAborted
        assert recorder.labels == ["global", "veto"]
    """

    calls: list[GuardCall] = field(default_factory=list)

    def guard(self, label: str, verdict: Any = None) -> Any:
        """A ``(to, from_, next)`` guard that calls ``next(verdict)``."""

        def recording_guard(to: Route, from_: Route, next_: Next) -> None:
            self.calls.append(GuardCall(label, to, from_))
            next_(verdict)

        recording_guard.__name__ = f"guard_{label}"
        return recording_guard

    def view_guard(self, label: str, verdict: Any = None) -> Any:
        """An in-view ``(instance, to, from_, next)`` guard."""

        def recording_view_guard(instance: Any, to: Route, from_: Route, next_: Next) -> None:
            self.calls.append(GuardCall(label, to, from_))
            next_(verdict)

        recording_view_guard.__name__ = f"view_guard_{label}"
        return recording_view_guard

    @property
    def labels(self) -> list[str]:
        return [call.label for call in self.calls]

    @property
    def count(self) -> int:
        return len(self.calls)

    def reset(self) -> None:
        self.calls.clear()
