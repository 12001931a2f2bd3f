"""Invoke helpers — call sync or async callables uniformly.

Guards, hooks, and navigation callbacks can be ``def`` or ``async def``.
Any code that calls a user-provided callable must handle both cases.
This module provides a single helper so the sync/async check lives in
exactly one place.

Usage::

    from homing._internal.invoke import invoke

    result = await invoke(guard, to, from_, next)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync, returns immediately, no await needed
        def require_login(to, from_, next):
            next(None if session.user else "/login")

        # async, returns coroutine, awaited automatically
        async def load_user(to, from_, next):
            await users.fetch(to.params["id"])
            next()
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
