"""Locating the routes a CLI command works on.

``homing routes`` and ``homing match`` take a ``"module:attribute"``
target.  The attribute may hold a ``Router``, a plain list of route
configurations, or a zero-argument factory producing either one::

    homing routes myapp.routing:router
    homing routes myapp.routing:ROUTES
    homing match myapp.routing:build_router /users/42
"""

import importlib
from collections.abc import Mapping, Sequence
from typing import Any

from homing.router import Router
from homing.routing.record import RouteConfig

# Attributes tried, in order, when the target names only a module
DEFAULT_ATTRIBUTES = ("router", "routes")


def _lookup(module: Any, target: str, attribute: str) -> Any:
    if attribute:
        return getattr(module, attribute)
    for candidate in DEFAULT_ATTRIBUTES:
        if hasattr(module, candidate):
            return getattr(module, candidate)
    msg = f"{target!r} defines none of {', '.join(DEFAULT_ATTRIBUTES)}; name one with {target}:<attribute>"
    raise AttributeError(msg)


def _is_route_list(value: Any) -> bool:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return False
    return all(isinstance(item, (RouteConfig, Mapping)) for item in value)


def _as_router(value: Any, target: str) -> Router:
    if isinstance(value, Router):
        return value
    if _is_route_list(value):
        return Router(value)
    msg = (
        f"{target!r} is a {type(value).__name__}; expected a homing.Router "
        "or a list of route configurations"
    )
    raise TypeError(msg)


def resolve_router(target: str) -> Router:
    """Load the router named by *target*.

    A list of route configurations is compiled into a fresh ``Router``.
    A callable that is neither is called once with no arguments and its
    result used instead.

    Raises:
        ModuleNotFoundError: The module does not exist.
        AttributeError: The attribute (or every default one) is missing.
        TypeError: The value is not usable as routes, or its factory failed.
    """
    module_name, _, attribute = target.partition(":")
    value = _lookup(importlib.import_module(module_name), target, attribute)

    if callable(value) and not isinstance(value, Router):
        try:
            value = value()
        except Exception as exc:
            msg = f"building routes from {target!r} failed: {exc}"
            raise TypeError(msg) from exc

    return _as_router(value, target)
