"""Path parameter filling.

Wraps the memoized template fillers so a missing or malformed
parameter degrades to an empty path (which then fails to match)
instead of raising across the matcher boundary.
"""

import logging
from collections.abc import Mapping
from typing import Any

from homing.errors import MissingParam
from homing.routing.pattern import compile_filler

logger = logging.getLogger("homing.routing")

# Param name the bare "*" wildcard is exposed under
PATH_MATCH = "pathMatch"


def fill_params(path: str, params: Mapping[str, Any] | None, route_msg: str) -> str:
    """Fill *params* into the template *path*.

    Returns ``""`` when the template cannot be filled.  A string
    ``pathMatch`` param feeds the wildcard key; when one is given the
    failure is expected (an empty wildcard pass-through) and not logged.
    """
    data: dict[Any, Any] = dict(params or {})
    path_match = data.get(PATH_MATCH)
    if isinstance(path_match, str):
        data[0] = path_match
    try:
        return compile_filler(path)(data)
    except MissingParam as exc:
        if not isinstance(path_match, str):
            logger.warning("missing param for %s: %s", route_msg, exc)
        return ""
