"""Unit tests for path parsing, lookup and selector translation."""

from collections import namedtuple
from dataclasses import dataclass

import pytest

from storewatch import ABSENT, InvalidArgumentError, InvalidPathError
from storewatch.paths import PathSelector, PathSelectorTranslator, get_path, parse_path


@pytest.mark.unit
@pytest.mark.paths
def test_parse_path_splits_dots_and_bracket_indexes():
    """Dotted keys stay strings, bracketed indexes become ints"""
    assert parse_path("a.b.c") == ("a", "b", "c")
    assert parse_path("todos[0].title") == ("todos", 0, "title")
    assert parse_path("grid[1][2]") == ("grid", 1, 2)


@pytest.mark.unit
@pytest.mark.paths
@pytest.mark.parametrize("path", ["", "a..b", "a.", "a[b]", "a[0", "a]"])
def test_parse_path_rejects_malformed_paths(path):
    """Empty paths, empty segments and broken brackets are invalid"""
    with pytest.raises(InvalidPathError):
        parse_path(path)


@pytest.mark.unit
@pytest.mark.paths
def test_get_path_reads_nested_mappings_and_sequences():
    state = {"todos": [{"title": "write docs"}, {"title": "ship"}]}

    assert get_path(state, "todos[1].title") == "ship"
    assert get_path(state, "todos.0.title") == "write docs"


@pytest.mark.unit
@pytest.mark.paths
def test_get_path_returns_absent_for_missing_segments():
    """Missing keys, short sequences and None never raise"""
    state = {"a": {"b": None}, "items": [1]}

    assert get_path(state, "a.x") is ABSENT
    assert get_path(state, "a.b.c") is ABSENT
    assert get_path(state, "items[5]") is ABSENT
    assert get_path(state, "nothing.at.all") is ABSENT


@pytest.mark.unit
@pytest.mark.paths
def test_get_path_falls_back_to_attributes():
    """Dataclasses and named tuples are traversed by attribute"""

    @dataclass(frozen=True)
    class User:
        name: str

    Point = namedtuple("Point", "x y")
    state = {"user": User("Alice"), "origin": Point(0, 3)}

    assert get_path(state, "user.name") == "Alice"
    assert get_path(state, "origin.y") == 3
    assert get_path(state, "user.email") is ABSENT


@pytest.mark.unit
@pytest.mark.paths
def test_get_path_matches_integer_mapping_keys():
    state = {"by_id": {7: "seven"}}

    assert get_path(state, "by_id.7") == "seven"


@pytest.mark.unit
@pytest.mark.paths
def test_absent_is_a_falsy_singleton():
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"
    assert type(ABSENT)() is ABSENT


@pytest.mark.unit
@pytest.mark.paths
def test_translator_returns_same_selector_for_same_path():
    """Repeated resolution of one path yields one selector object"""
    translator = PathSelectorTranslator()

    first = translator.resolve("a.b")
    second = translator.resolve("a.b")

    assert first is second
    assert translator.resolve("a.c") is not first
    assert len(translator) == 2
    assert "a.b" in translator


@pytest.mark.unit
@pytest.mark.paths
def test_translators_do_not_share_selectors():
    assert PathSelectorTranslator().resolve("a") is not PathSelectorTranslator().resolve("a")


@pytest.mark.unit
@pytest.mark.paths
@pytest.mark.parametrize("path", ["", None, 42, ["a"]])
def test_translator_rejects_empty_and_non_string_paths(path):
    with pytest.raises(InvalidPathError):
        PathSelectorTranslator().resolve(path)


@pytest.mark.unit
@pytest.mark.paths
def test_invalid_path_error_is_an_invalid_argument_error():
    assert issubclass(InvalidPathError, InvalidArgumentError)


@pytest.mark.unit
@pytest.mark.paths
def test_path_selector_reads_state_and_describes_itself():
    selector = PathSelector("a.b")

    assert selector({"a": {"b": 2}}) == 2
    assert selector({}) is ABSENT
    assert repr(selector) == "PathSelector('a.b')"
