"""Tests for homing.location.path — path splitting and resolution."""

import pytest

from homing.location.path import clean_path, parse_path, resolve_path


class TestParsePath:
    def test_all_parts(self) -> None:
        assert parse_path("/a/b?x=1#top") == ("/a/b", "x=1", "#top")

    def test_path_only(self) -> None:
        assert parse_path("/a") == ("/a", "", "")

    def test_question_mark_inside_hash(self) -> None:
        assert parse_path("/a#frag?x") == ("/a", "", "#frag?x")


class TestResolvePath:
    @pytest.mark.parametrize(
        ("relative", "base", "append", "expected"),
        [
            ("/abs", "/a/b", False, "/abs"),
            ("bar", "/foo/baz", False, "/foo/bar"),
            ("bar", "/foo", True, "/foo/bar"),
            ("bar", "/foo/", True, "/foo/bar"),
            ("../qux", "/a/b/c", False, "/a/qux"),
            ("./qux", "/a/b", False, "/a/qux"),
            ("../../../x", "/a", False, "/x"),
            ("?x=1", "/a", False, "/a?x=1"),
            ("#top", "/a", False, "/a#top"),
        ],
    )
    def test_resolve(self, relative: str, base: str, append: bool, expected: str) -> None:
        assert resolve_path(relative, base, append) == expected


class TestCleanPath:
    def test_collapses_double_slashes(self) -> None:
        assert clean_path("/a//b") == "/a/b"
        assert clean_path("//") == "/"
