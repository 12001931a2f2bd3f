"""Route configuration input and compiled route records.

``RouteConfig`` is what users declare; ``RouteRecord`` is what the
route table compiles it into.  Records are frozen: only their
``instances``/``entered_cbs``/``components`` dicts change after
creation (mounted views, deferred enter callbacks, resolved lazy
components).  Records compare by identity; every ``Route`` that
matches a record holds the same object.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any, TypeAlias

from homing._internal.types import NavigationGuard
from homing.errors import ConfigurationError
from homing.routing.pattern import CompiledPath, PathOptions

# A single guard or several, in order
GuardSpec: TypeAlias = NavigationGuard | Sequence[NavigationGuard] | None

# camelCase spellings accepted by RouteConfig.from_mapping
_KEY_ALIASES: dict[str, str] = {
    "beforeEnter": "before_enter",
    "caseSensitive": "case_sensitive",
    "pathToRegexpOptions": "path_options",
}


@dataclass(frozen=True, slots=True)
class ViewGuards:
    """In-view guards for one named view slot.

    Leave and update guards receive the mounted view instance first:
    ``guard(instance, to, from_, next)``.  They are skipped when nothing
    is mounted in the slot.  Enter guards run before the view exists:
    ``guard(to, from_, next)``; passing a callable to ``next`` defers it
    until the view is mounted.
    """

    before_route_enter: GuardSpec = None
    before_route_update: GuardSpec = None
    before_route_leave: GuardSpec = None


@dataclass(frozen=True, slots=True)
class LazyComponent:
    """A component produced on demand by a zero-argument factory.

    The factory may be sync or async.  It is resolved once, when a
    navigation first activates a record that references it::

        RouteConfig("/reports", component=LazyComponent(load_reports_view))
    """

    factory: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """A declared route.

    Mappings with the same keys are accepted wherever a ``RouteConfig``
    is, and converted through ``from_mapping``.
    """

    path: str
    name: str | None = None
    component: Any = None
    components: Mapping[str, Any] | None = None
    redirect: Any = None
    alias: str | Sequence[str] | None = None
    children: Sequence[RouteConfig | Mapping[str, Any]] = ()
    before_enter: GuardSpec = None
    meta: Mapping[str, Any] | None = None
    props: Any = None
    case_sensitive: bool | None = None
    path_options: PathOptions | None = None
    guards: ViewGuards | Mapping[str, ViewGuards] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteConfig:
        """Build a config from a plain mapping.

        Raises ``ConfigurationError`` for a missing ``path`` or unknown keys.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                msg = f"Unknown route option {key!r} in route {data.get('path')!r}"
                raise ConfigurationError(msg)
            kwargs[name] = value

        if kwargs.get("path") is None:
            msg = f'"path" is required in a route configuration: {dict(data)!r}'
            raise ConfigurationError(msg)

        options = kwargs.get("path_options")
        if isinstance(options, Mapping):
            kwargs["path_options"] = PathOptions(**options)
        return cls(**kwargs)


def as_route_config(value: RouteConfig | Mapping[str, Any]) -> RouteConfig:
    """Coerce *value* into a ``RouteConfig``."""
    if isinstance(value, RouteConfig):
        return value
    if isinstance(value, Mapping):
        return RouteConfig.from_mapping(value)
    msg = f"Route configuration must be a RouteConfig or a mapping, got {type(value).__name__}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True, eq=False)
class RouteRecord:
    """A compiled, indexed route definition.

    ``parent`` points at the enclosing record; ``match_as`` is set on
    alias records and names the canonical path they stand for.
    """

    path: str
    regex: CompiledPath
    components: dict[str, Any]
    alias: tuple[str, ...] = ()
    name: str | None = None
    parent: RouteRecord | None = None
    match_as: str | None = None
    redirect: Any = None
    before_enter: tuple[NavigationGuard, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)
    props: dict[str, Any] = field(default_factory=dict)
    guards: dict[str, ViewGuards] = field(default_factory=dict)
    instances: dict[str, Any] = field(default_factory=dict)
    entered_cbs: dict[str, list[Callable[[Any], Any]]] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"RouteRecord(path={self.path!r}, name={self.name!r})"


def as_guard_tuple(spec: GuardSpec) -> tuple[NavigationGuard, ...]:
    """Normalize a guard or sequence of guards to a tuple."""
    if spec is None:
        return ()
    if callable(spec):
        return (spec,)
    return tuple(spec)
