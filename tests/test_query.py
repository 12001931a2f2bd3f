"""Tests for homing.location.query — query string codec."""

import logging

import pytest

from homing.location.query import (
    clone_query,
    parse_query,
    resolve_query,
    stringify_query,
)


class TestParseQuery:
    def test_values_bare_keys_and_repeats(self) -> None:
        assert parse_query("a=1&b&c=2&c=3") == {"a": "1", "b": None, "c": ["2", "3"]}

    def test_leading_question_mark(self) -> None:
        assert parse_query("?q=x") == {"q": "x"}

    def test_leading_hash_and_ampersand(self) -> None:
        assert parse_query("#q=x") == {"q": "x"}
        assert parse_query("&q=x") == {"q": "x"}

    def test_empty(self) -> None:
        assert parse_query("") == {}
        assert parse_query("?") == {}

    def test_plus_is_space(self) -> None:
        assert parse_query("q=hello+world") == {"q": "hello world"}

    def test_percent_decoding(self) -> None:
        assert parse_query("name=J%C3%BCrgen") == {"name": "Jürgen"}

    def test_value_with_equals(self) -> None:
        assert parse_query("expr=a=b") == {"expr": "a=b"}

    def test_malformed_escape_left_intact(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="homing.location"):
            result = parse_query("x=%E0%A4%A")
        assert result == {"x": "%E0%A4%A"}
        assert "Leaving it intact" in caplog.text


class TestStringifyQuery:
    def test_mixed(self) -> None:
        assert stringify_query({"a": "1", "b": None, "c": ["2", "3"]}) == "?a=1&b&c=2&c=3"

    def test_empty(self) -> None:
        assert stringify_query({}) == ""
        assert stringify_query(None) == ""

    def test_empty_list_omitted(self) -> None:
        assert stringify_query({"a": []}) == ""
        assert stringify_query({"a": [], "b": "1"}) == "?b=1"

    def test_encoding(self) -> None:
        assert stringify_query({"q": "a b", "path": "/x"}) == "?q=a%20b&path=%2Fx"

    def test_comma_kept(self) -> None:
        assert stringify_query({"ids": "1,2"}) == "?ids=1,2"

    def test_bool_and_int(self) -> None:
        assert stringify_query({"flag": True, "page": 2}) == "?flag=true&page=2"


class TestRoundTrip:
    @pytest.mark.parametrize(
        "query",
        [
            {"a": "1"},
            {"a": "x y", "b": "ü"},
            {"tags": ["a", "b", "c"], "q": "&="},
            {"flag": None, "x": "1"},
        ],
    )
    def test_parse_inverts_stringify(self, query: dict) -> None:
        assert parse_query(stringify_query(query)) == query


class TestResolveQuery:
    def test_explicit_values_win(self) -> None:
        assert resolve_query("a=1&b=2", {"a": "9"}) == {"a": "9", "b": "2"}

    def test_explicit_values_cast_to_text(self) -> None:
        assert resolve_query("", {"page": 2, "ids": [1, 2], "x": None}) == {
            "page": "2",
            "ids": ["1", "2"],
            "x": None,
        }

    def test_custom_parser(self) -> None:
        assert resolve_query("raw", None, lambda q: {"raw": q}) == {"raw": "raw"}

    def test_failing_parser_yields_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(query: str) -> dict:
            raise ValueError("nope")

        with caplog.at_level(logging.WARNING, logger="homing.location"):
            assert resolve_query("a=1", None, broken) == {}
        assert "Failed to parse query" in caplog.text


class TestCloneQuery:
    def test_lists_are_copied(self) -> None:
        original = {"a": ["1"], "b": "2"}
        copy = clone_query(original)
        copy["a"].append("3")
        assert original["a"] == ["1"]
