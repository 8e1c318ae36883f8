"""Tests for custom field values."""

import pytest

from gh2jira.core.domain.value_objects import (
    MISSING,
    FieldName,
    Missing,
    Num,
    Str,
    StrList,
    field_value,
)


class TestFieldValueConversion:
    """Tests for field_value."""

    @pytest.mark.parametrize("raw, expected", [
        (None, MISSING),
        (True, MISSING),
        ("open", Str("open")),
        (7, Num(7)),
        (1001.0, Num(1001.0)),
        (["bug", "help-wanted"], StrList(("bug", "help-wanted"))),
        ([], StrList(())),
        (["bug", 3], MISSING),
        ({"value": "x"}, MISSING),
    ])
    def test_conversion(self, raw, expected):
        assert field_value(raw) == expected


class TestAsInt:
    """Tests for the correlation key accessor."""

    def test_integral_float(self):
        assert Num(484163403.0).as_int() == 484163403

    def test_int(self):
        assert Num(12).as_int() == 12

    def test_fractional_float(self):
        assert Num(1.5).as_int() is None

    def test_digit_string(self):
        assert Str("42").as_int() == 42

    def test_digit_string_with_whitespace(self):
        assert Str(" 42 ").as_int() == 42

    @pytest.mark.parametrize("text", ["", "4 2", "-1", "1e3", "abc", "١٢"])
    def test_non_numeric_string(self, text):
        assert Str(text).as_int() is None

    def test_other_kinds(self):
        assert MISSING.as_int() is None
        assert StrList(("1",)).as_int() is None


class TestAccessors:
    """Tests for as_str and as_str_list."""

    def test_as_str(self):
        assert Str("open").as_str() == "open"
        assert Num(1).as_str() is None
        assert Missing().as_str() is None

    def test_as_str_list(self):
        assert StrList(("a", "b")).as_str_list() == ["a", "b"]
        assert Str("a").as_str_list() is None

    def test_to_json(self):
        assert StrList(("a",)).to_json() == ["a"]
        assert Num(3).to_json() == 3
        assert MISSING.to_json() is None


class TestFieldName:
    """Tests for FieldName."""

    def test_values_are_jira_field_names(self):
        assert FieldName.GITHUB_ID.value == "GitHub ID"
        assert FieldName.LAST_SYNC.value == "Last Issue-Sync Update"

    def test_lookup_by_name(self):
        assert FieldName("GitHub Labels") is FieldName.GITHUB_LABELS
