"""Path pattern compiler.

Turns a path template into a compiled regular expression plus the
ordered list of parameter keys it captures, and into a *filler* that
goes the other way (params -> concrete path).

Template grammar::

    /users/:id            named segment
    /users/:id?           optional segment
    /files/:path+         one or more segments
    /files/:path*         zero or more segments
    /users/:id(\\d+)       named segment with a custom pattern
    /icons/(.*)           unnamed group, keyed by its index
    *                     wildcard, keyed by index 0 (surfaced as ``pathMatch``)
    /a\\:b                 escaped literal

Compiled fillers are memoized by template string.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any
from urllib.parse import quote

from homing.errors import MissingParam

_TOKEN_RE = re.compile(
    r"(\\.)"
    r"|([/.])?(?:(?::(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))"
)
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")

# Characters encodeURI leaves alone, minus "/", "?" and "#" inside a segment
_SEGMENT_SAFE = "!*'();,:@&=+$"
# Wildcard values keep "/"
_ASTERISK_SAFE = "!*'();,/:@&=+$"


@dataclass(frozen=True, slots=True)
class PathKey:
    """A parameter captured by a path template.

    ``name`` is the parameter name, or its position for unnamed groups
    and the bare ``*`` wildcard.
    """

    name: str | int
    prefix: str = ""
    delimiter: str = "/"
    optional: bool = False
    repeat: bool = False
    partial: bool = False
    asterisk: bool = False
    pattern: str = r"[^/]+?"


Token = str | PathKey


@dataclass(frozen=True, slots=True)
class PathOptions:
    """Regex construction options for one template.

    Attributes:
        strict: Disallow an optional trailing delimiter.
        sensitive: Match case-sensitively.
        end: Anchor the match at the end of the path.
    """

    strict: bool = False
    sensitive: bool = False
    end: bool = True


@dataclass(frozen=True, slots=True)
class CompiledPath:
    """A compiled template: the matcher plus its ordered keys."""

    pattern: re.Pattern[str]
    keys: tuple[PathKey, ...]

    def match(self, path: str) -> re.Match[str] | None:
        return self.pattern.match(path)


def _escape_group(group: str) -> str:
    return _GROUP_ESCAPE_RE.sub(r"\\\1", group)


def parse(template: str, delimiter: str = "/") -> list[Token]:
    """Tokenize *template* into literal strings and ``PathKey`` objects."""
    tokens: list[Token] = []
    key_index = 0
    index = 0
    path = ""

    for res in _TOKEN_RE.finditer(template):
        escaped = res.group(1)
        offset = res.start()
        path += template[index:offset]
        index = res.end()

        if escaped:
            path += escaped[1]
            continue

        following = template[index : index + 1] or None
        prefix = res.group(2)
        name = res.group(3)
        capture = res.group(4)
        group = res.group(5)
        modifier = res.group(6)
        asterisk = res.group(7)

        if path:
            tokens.append(path)
            path = ""

        key_delimiter = prefix or delimiter
        custom = capture or group
        if custom:
            pattern = _escape_group(custom)
        elif asterisk:
            pattern = ".*"
        else:
            pattern = f"[^{re.escape(key_delimiter)}]+?"

        if name:
            key_name: str | int = name
        else:
            key_name = key_index
            key_index += 1

        tokens.append(
            PathKey(
                name=key_name,
                prefix=prefix or "",
                delimiter=key_delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None and following is not None and following != prefix,
                asterisk=bool(asterisk),
                pattern=pattern,
            )
        )

    if index < len(template):
        path += template[index:]
    if path:
        tokens.append(path)
    return tokens


def tokens_to_regex(tokens: list[Token], options: PathOptions, delimiter: str = "/") -> re.Pattern[str]:
    """Build the anchored regular expression for a token list."""
    route = ""
    for token in tokens:
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        if token.repeat:
            capture += f"(?:{prefix}{capture})*"

        if token.optional:
            if not token.partial:
                capture = f"(?:{prefix}({capture}))?"
            else:
                capture = f"{prefix}({capture})?"
        else:
            capture = f"{prefix}({capture})"
        route += capture

    escaped_delimiter = re.escape(delimiter)
    ends_with_delimiter = route.endswith(escaped_delimiter)

    if not options.strict:
        if ends_with_delimiter:
            route = route[: -len(escaped_delimiter)]
        route += f"(?:{escaped_delimiter}(?=\\Z))?"

    if options.end:
        route += r"\Z"
    elif not (options.strict and ends_with_delimiter):
        route += f"(?={escaped_delimiter}|\\Z)"

    flags = 0 if options.sensitive else re.IGNORECASE
    return re.compile(f"^{route}", flags)


def compile_path(template: str, options: PathOptions | None = None) -> CompiledPath:
    """Compile *template* into a matcher and its ordered parameter keys.

    Usage::

        compiled = compile_path("/users/:id")
        m = compiled.match("/users/42")
        m.group(1)  # "42"
        compiled.keys[0].name  # "id"
    """
    tokens = parse(template)
    keys = tuple(token for token in tokens if isinstance(token, PathKey))
    return CompiledPath(pattern=tokens_to_regex(tokens, options or PathOptions()), keys=keys)


def encode_segment(value: str) -> str:
    """Encode a parameter value for use inside one path segment."""
    return quote(value, safe=_SEGMENT_SAFE)


def encode_asterisk(value: str) -> str:
    """Encode a wildcard value; slashes are kept."""
    return quote(value, safe=_ASTERISK_SAFE)


class PathFiller:
    """Inverse of a compiled template: fills params into a concrete path.

    Raises ``MissingParam`` when a required key has no value or a value
    does not fit its key's pattern.
    """

    __slots__ = ("_keys", "_tokens")

    def __init__(self, template: str) -> None:
        self._tokens = parse(template)
        # one validation regex per key, looked up by position
        self._keys: dict[int, re.Pattern[str]] = {
            position: re.compile(f"^(?:{token.pattern})\\Z", re.IGNORECASE)
            for position, token in enumerate(self._tokens)
            if isinstance(token, PathKey)
        }

    def __call__(self, params: Mapping[Any, Any] | None = None) -> str:
        data = params or {}
        path = ""

        for position, token in enumerate(self._tokens):
            if isinstance(token, str):
                path += token
                continue
            matcher = self._keys[position]

            value = data.get(token.name)
            if value is None and isinstance(token.name, int):
                value = data.get(str(token.name))

            if value is None:
                if token.optional:
                    if token.partial:
                        path += token.prefix
                    continue
                msg = f'Expected "{token.name}" to be defined'
                raise MissingParam(msg)

            if isinstance(value, (list, tuple)):
                if not token.repeat:
                    msg = f'Expected "{token.name}" to not repeat, but received {list(value)!r}'
                    raise MissingParam(msg)
                if not value:
                    if token.optional:
                        continue
                    msg = f'Expected "{token.name}" to not be empty'
                    raise MissingParam(msg)
                for index, item in enumerate(value):
                    segment = encode_segment(str(item))
                    if not matcher.match(segment):
                        msg = (
                            f'Expected all "{token.name}" to match "{token.pattern}", '
                            f'but received "{segment}"'
                        )
                        raise MissingParam(msg)
                    path += (token.prefix if index == 0 else token.delimiter) + segment
                continue

            text = str(value)
            segment = encode_asterisk(text) if token.asterisk else encode_segment(text)
            if not matcher.match(segment):
                msg = f'Expected "{token.name}" to match "{token.pattern}", but received "{segment}"'
                raise MissingParam(msg)
            path += token.prefix + segment

        return path


@lru_cache(maxsize=None)
def compile_filler(template: str) -> PathFiller:
    """Return the (memoized) filler for *template*."""
    return PathFiller(template)
