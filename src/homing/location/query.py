"""Query string codec.

Parses ``a=1&b&c=2&c=3`` into ``{"a": "1", "b": None, "c": ["2", "3"]}``
and back.  A key with no ``=`` decodes to ``None`` and ``None`` encodes
back to a bare key, so string/list-of-string mappings survive a
round trip.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias
from urllib.parse import quote, unquote

logger = logging.getLogger("homing.location")

QueryValue: TypeAlias = str | None | list[str | None]

# Commas stay readable; everything else outside the unreserved set is escaped
_SAFE = ","


def encode(value: str) -> str:
    """Percent-encode a query key or value (RFC 3986 unreserved chars + comma kept)."""
    return quote(value, safe=_SAFE)


def decode(value: str) -> str:
    """Percent-decode *value*, leaving it intact when it is not valid UTF-8."""
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        logger.warning('Error decoding "%s". Leaving it intact.', value)
        return value


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def cast_query_value(value: Any) -> Any:
    """Coerce an explicit query value to its string form.

    ``None`` and mappings pass through untouched; lists are cast item by item.
    """
    if value is None or isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        return [cast_query_value(item) for item in value]
    return _as_text(value)


def parse_query(query: str) -> dict[str, QueryValue]:
    """Parse a query string (with or without a leading ``?``, ``#`` or ``&``).

    Repeated keys collect into a list in order of appearance.
    """
    result: dict[str, QueryValue] = {}
    query = query.strip()
    if query[:1] in ("?", "#", "&"):
        query = query[1:]
    if not query:
        return result

    for param in query.split("&"):
        parts = param.replace("+", " ").split("=")
        key = decode(parts[0])
        value = decode("=".join(parts[1:])) if len(parts) > 1 else None

        if key not in result:
            result[key] = value
        else:
            existing = result[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[key] = [existing, value]
    return result


def stringify_query(obj: Mapping[str, Any] | None) -> str:
    """Serialize a query mapping to ``?k=v&...``, or ``""`` when empty.

    ``None`` values become bare keys; empty lists are omitted.
    """
    if not obj:
        return ""
    parts: list[str] = []
    for key, value in obj.items():
        if value is None:
            parts.append(encode(key))
        elif isinstance(value, (list, tuple)):
            for item in value:
                if item is None:
                    parts.append(encode(key))
                else:
                    parts.append(f"{encode(key)}={encode(_as_text(item))}")
        else:
            parts.append(f"{encode(key)}={encode(_as_text(value))}")
    return f"?{'&'.join(parts)}" if parts else ""


def resolve_query(
    query: str | None,
    extra_query: Mapping[str, Any] | None = None,
    parse: Callable[[str], dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Parse *query* and overlay *extra_query* on top of it.

    Explicit values win per key over the ones embedded in the string.
    A failing custom parser is logged and treated as an empty query.
    """
    parser = parse or parse_query
    try:
        parsed = dict(parser(query or ""))
    except Exception as exc:
        logger.warning("Failed to parse query %r: %s", query, exc)
        parsed = {}
    for key, value in (extra_query or {}).items():
        parsed[key] = cast_query_value(value)
    return parsed


def clone_query(query: Mapping[str, Any]) -> dict[str, Any]:
    """Copy *query* so list values are not shared with the source."""
    return {key: list(value) if isinstance(value, list) else value for key, value in query.items()}
