"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

# Backend mode: only affects href formatting; the backend itself is pluggable
Mode = Literal["memory", "hash", "history"]


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(base="/app", debug=True)
    """

    # History
    mode: Mode = "memory"
    base: str = ""
    initial_location: str = "/"

    # Diagnostics: extra configuration warnings while building the route table
    debug: bool = False

    # Query codec overrides: parse(str) -> dict, stringify(dict) -> "?a=b" or ""
    parse_query: Callable[[str], dict[str, Any]] | None = None
    stringify_query: Callable[[Mapping[str, Any]], str] | None = None

    # Replaces lazy component resolution (step 4e of a transition).
    # Called with the activated records; returns a navigation guard.
    component_resolver: Callable[..., Any] | None = None


def normalize_base(base: str | None) -> str:
    """Ensure *base* starts with ``/`` and has no trailing slash.

    An empty base stays empty, the root of the location space.
    """
    if not base:
        return ""
    if not base.startswith("/"):
        base = "/" + base
    return base.removesuffix("/")
