"""Path string helpers: split, resolve, and clean location paths."""

from typing import NamedTuple


class ParsedPath(NamedTuple):
    """A raw location string split into its three parts.

    ``query`` has no leading ``?``; ``hash`` keeps its leading ``#``.
    """

    path: str
    query: str
    hash: str


def parse_path(path: str) -> ParsedPath:
    """Split ``/a/b?x=1#top`` into ``("/a/b", "x=1", "#top")``."""
    hash_ = ""
    query = ""

    hash_index = path.find("#")
    if hash_index >= 0:
        hash_ = path[hash_index:]
        path = path[:hash_index]

    query_index = path.find("?")
    if query_index >= 0:
        query = path[query_index + 1 :]
        path = path[:query_index]

    return ParsedPath(path, query, hash_)


def resolve_path(relative: str, base: str, append: bool = False) -> str:
    """Resolve *relative* against *base* the way a filesystem path would.

    Absolute paths pass through.  ``?``/``#``-only targets attach to *base*.
    Without *append*, the last segment of *base* is replaced; with it,
    *relative* is appended below *base*.

    Examples::

        resolve_path("bar", "/foo/baz")          -> "/foo/bar"
        resolve_path("bar", "/foo", append=True) -> "/foo/bar"
        resolve_path("../qux", "/a/b/c")         -> "/a/qux"
    """
    first = relative[:1]
    if first == "/":
        return relative
    if first in ("?", "#"):
        return base + relative

    stack = base.split("/")

    # drop the last segment unless appending below a non-empty one
    if not append or not stack[-1]:
        stack.pop()

    for segment in relative.removeprefix("/").split("/"):
        if segment == "..":
            if stack:
                stack.pop()
        elif segment != ".":
            stack.append(segment)

    if not stack or stack[0] != "":
        stack.insert(0, "")

    return "/".join(stack)


def clean_path(path: str) -> str:
    """Collapse every ``//`` into ``/``."""
    return path.replace("//", "/")
