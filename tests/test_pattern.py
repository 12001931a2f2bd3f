"""Tests for homing.routing.pattern — path template compiler and filler."""

import pytest

from homing.errors import MissingParam
from homing.routing.pattern import PathKey, PathOptions, compile_filler, compile_path, parse


class TestParse:
    def test_static(self) -> None:
        assert parse("/users") == ["/users"]

    def test_named_key(self) -> None:
        tokens = parse("/users/:id")
        assert tokens[0] == "/users"
        key = tokens[1]
        assert isinstance(key, PathKey)
        assert key.name == "id"
        assert key.prefix == "/"
        assert key.optional is False
        assert key.repeat is False

    def test_modifiers(self) -> None:
        optional, plus, star = (
            parse("/:a?")[0],
            parse("/:b+")[0],
            parse("/:c*")[0],
        )
        assert isinstance(optional, PathKey) and optional.optional and not optional.repeat
        assert isinstance(plus, PathKey) and plus.repeat and not plus.optional
        assert isinstance(star, PathKey) and star.repeat and star.optional

    def test_unnamed_group_is_indexed(self) -> None:
        tokens = parse(r"/icons/(.*)")
        key = tokens[1]
        assert isinstance(key, PathKey)
        assert key.name == 0
        assert key.pattern == ".*"

    def test_bare_wildcard(self) -> None:
        (key,) = parse("*")
        assert isinstance(key, PathKey)
        assert key.name == 0
        assert key.asterisk is True
        assert key.pattern == ".*"

    def test_escaped_colon_is_literal(self) -> None:
        assert parse(r"/a\:b") == ["/a:b"]


class TestCompilePath:
    def test_named_segment(self) -> None:
        compiled = compile_path("/users/:id")
        m = compiled.match("/users/42")
        assert m is not None
        assert m.group(1) == "42"
        assert compiled.keys[0].name == "id"

    def test_no_match(self) -> None:
        assert compile_path("/users/:id").match("/posts/42") is None

    def test_trailing_newline_is_part_of_the_value(self) -> None:
        m = compile_path("/users/:id").match("/users/42\n")
        assert m is not None
        assert m.group(1) == "42\n"

    def test_trailing_newline_does_not_match_static_path(self) -> None:
        assert compile_path("/about").match("/about\n") is None

    def test_case_insensitive_by_default(self) -> None:
        assert compile_path("/users/:id").match("/USERS/42") is not None

    def test_sensitive(self) -> None:
        compiled = compile_path("/users/:id", PathOptions(sensitive=True))
        assert compiled.match("/USERS/42") is None

    def test_trailing_slash_allowed(self) -> None:
        assert compile_path("/users/:id").match("/users/42/") is not None

    def test_strict_rejects_trailing_slash(self) -> None:
        compiled = compile_path("/users/:id", PathOptions(strict=True))
        assert compiled.match("/users/42/") is None

    def test_end_false_matches_prefix(self) -> None:
        compiled = compile_path("/users", PathOptions(end=False))
        assert compiled.match("/users/42") is not None
        assert compiled.match("/usersx") is None

    def test_optional_segment(self) -> None:
        compiled = compile_path("/users/:id?")
        assert compiled.match("/users") is not None
        m = compiled.match("/users/7")
        assert m is not None
        assert m.group(1) == "7"

    def test_repeat_segment(self) -> None:
        m = compile_path("/files/:path+").match("/files/a/b/c")
        assert m is not None
        assert m.group(1) == "a/b/c"

    def test_custom_pattern(self) -> None:
        compiled = compile_path(r"/users/:id(\d+)")
        assert compiled.match("/users/abc") is None
        assert compiled.match("/users/12") is not None

    def test_wildcard(self) -> None:
        m = compile_path("*").match("/nope/deeper")
        assert m is not None
        assert m.group(1) == "/nope/deeper"

    def test_root(self) -> None:
        compiled = compile_path("")
        assert compiled.match("/") is not None
        assert compiled.match("/a") is None


class TestFiller:
    def test_fill_named(self) -> None:
        assert compile_filler("/users/:id")({"id": "7"}) == "/users/7"

    def test_fill_encodes_value(self) -> None:
        assert compile_filler("/users/:id")({"id": "a b"}) == "/users/a%20b"

    def test_fill_number(self) -> None:
        assert compile_filler("/users/:id")({"id": 7}) == "/users/7"

    def test_missing_required(self) -> None:
        with pytest.raises(MissingParam, match="to be defined"):
            compile_filler("/users/:id")({})

    def test_missing_param_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            compile_filler("/users/:id")({})

    def test_optional_missing(self) -> None:
        assert compile_filler("/users/:id?")({}) == "/users"

    def test_repeat_list(self) -> None:
        assert compile_filler("/files/:path+")({"path": ["a", "b"]}) == "/files/a/b"

    def test_list_for_non_repeat_key(self) -> None:
        with pytest.raises(MissingParam, match="to not repeat"):
            compile_filler("/users/:id")({"id": ["1", "2"]})

    def test_empty_list_for_required_repeat(self) -> None:
        with pytest.raises(MissingParam, match="to not be empty"):
            compile_filler("/files/:path+")({"path": []})

    def test_pattern_mismatch(self) -> None:
        with pytest.raises(MissingParam, match="to match"):
            compile_filler(r"/users/:id(\d+)")({"id": "abc"})

    def test_wildcard_keeps_slashes(self) -> None:
        assert compile_filler("*")({0: "/a/b"}) == "/a/b"

    def test_index_key_accepts_string_name(self) -> None:
        assert compile_filler(r"/icons/(.*)")({"0": "x.svg"}) == "/icons/x.svg"

    def test_memoized(self) -> None:
        assert compile_filler("/memo/:id") is compile_filler("/memo/:id")
