from __future__ import annotations

import pytest

from semlog.errors import InvalidContextKey, MissingPlaceholderKey
from semlog.interpolation import (
    escape_for_format,
    escaped_context,
    interpolate,
    placeholder_keys,
)


def test_interpolate_replaces_placeholders_from_context() -> None:
    message = interpolate(
        "{animal} is eating his good {meal}!",
        {"animal": "Bunny", "meal": "supper"},
    )
    assert message == "Bunny is eating his good supper!"


@pytest.mark.parametrize(
    "template",
    ["", "plain text", "100% sure", "{not closed", "closed}", "{}", "{with space}", "{dash-key}"],
)
def test_interpolate_without_placeholders_returns_template(template: str) -> None:
    assert interpolate(template, {"animal": "Bunny", "x": 1}) == template


def test_interpolate_preserves_literals_around_leading_and_trailing_placeholders() -> None:
    assert interpolate("{a}-{b}", {"a": 1, "b": 2}) == "1-2"
    assert interpolate("<{a}>", {"a": "x"}) == "<x>"
    assert interpolate("{a}{a}{a}", {"a": "ab"}) == "ababab"


def test_interpolate_stringifies_values() -> None:
    assert interpolate("{n} {flag} {items}", {"n": 3, "flag": True, "items": [1, 2]}) == "3 True [1, 2]"


def test_interpolate_renders_none_as_empty_string() -> None:
    assert interpolate("[{value}]", {"value": None}) == "[]"


def test_interpolate_missing_key_substitutes_empty_string() -> None:
    assert interpolate("Failed pulling from {remote}", {}) == "Failed pulling from "


def test_interpolate_missing_key_raises_in_strict_mode() -> None:
    with pytest.raises(MissingPlaceholderKey) as excinfo:
        interpolate("Failed pulling from {remote}", {"host": "h"}, strict=True)
    assert excinfo.value.key == "remote"
    assert "{remote}" in str(excinfo.value)


def test_interpolate_strict_mode_reports_first_missing_key_in_template_order() -> None:
    with pytest.raises(MissingPlaceholderKey) as excinfo:
        interpolate("{present} {second} {first}", {"present": 1}, strict=True)
    assert excinfo.value.key == "second"

    assert interpolate("{a}-{a}", {"a": "x"}, strict=True) == "x-x"


def test_interpolate_does_not_reinterpret_substituted_braces() -> None:
    assert interpolate("{a} {b}", {"a": "{b}", "b": "B"}) == "{b} B"


@pytest.mark.parametrize("bad_key", ["has space", "dash-key", "", 1, ("a", "b")])
def test_interpolate_rejects_non_identifier_keys(bad_key: object) -> None:
    with pytest.raises(InvalidContextKey) as excinfo:
        interpolate("no placeholders", {bad_key: "v"})
    assert excinfo.value.key == bad_key


def test_placeholder_keys_lists_keys_in_order() -> None:
    assert placeholder_keys("{b} then {a} then {b} and {bad key}") == ("b", "a", "b")


def test_escape_for_format_doubles_percent_signs() -> None:
    assert escape_for_format("50% of 10%") == "50%% of 10%%"
    assert escape_for_format(7) == "7"
    assert escape_for_format(None) == ""


def test_escaped_context_is_a_copy() -> None:
    original = {"rate": "5%", "count": 2}
    escaped = escaped_context(original)

    assert escaped == {"rate": "5%%", "count": "2"}
    assert original == {"rate": "5%", "count": 2}
    assert escaped is not original
