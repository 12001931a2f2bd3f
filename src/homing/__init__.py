"""Homing — route matching and guarded navigation for Python applications.

Resolves paths, route names, and partial locations into matched route
chains, and moves an application between routes through a pipeline of
sync or async navigation guards.

Basic usage::

    from homing import Router

    router = Router([
        {"path": "/", "name": "home"},
        {"path": "/users/:id", "name": "user"},
        {"path": "*", "name": "notfound"},
    ])

    router.match("/users/42").params  # {"id": "42"}

    await router.init()
    await router.push({"name": "user", "params": {"id": "7"}})
    router.current_route.full_path  # "/users/7"
"""

__version__ = "0.1.0"
__all__ = [
    "START",
    "ConfigurationError",
    "HomingError",
    "LazyComponent",
    "Location",
    "MemoryHistory",
    "NavigationAborted",
    "NavigationCancelled",
    "NavigationDuplicated",
    "NavigationFailure",
    "NavigationFailureType",
    "NavigationRedirected",
    "PathOptions",
    "Route",
    "RouteConfig",
    "RouteRecord",
    "Router",
    "RouterConfig",
    "RouterView",
    "ViewGuards",
    "is_navigation_failure",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import homing`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from homing.router import Router

        return Router

    if name == "RouterConfig":
        from homing.config import RouterConfig

        return RouterConfig

    if name == "MemoryHistory":
        from homing.navigation.memory import MemoryHistory

        return MemoryHistory

    if name == "RouterView":
        from homing.view import RouterView

        return RouterView

    if name == "Location":
        from homing.location.normalize import Location

        return Location

    if name == "PathOptions":
        from homing.routing.pattern import PathOptions

        return PathOptions

    if name in ("Route", "START"):
        from homing.routing import route as _route

        return getattr(_route, name)

    if name in ("LazyComponent", "RouteConfig", "RouteRecord", "ViewGuards"):
        from homing.routing import record as _record

        return getattr(_record, name)

    if name in (
        "ConfigurationError",
        "HomingError",
        "NavigationAborted",
        "NavigationCancelled",
        "NavigationDuplicated",
        "NavigationFailure",
        "NavigationFailureType",
        "NavigationRedirected",
        "is_navigation_failure",
    ):
        from homing import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
