"""
Unit tests for planner/validation.py
"""

import math
import re

import pytest

from planner import validation as v


class TestStringValidators:
    def test_non_empty_string(self):
        assert v.validate_non_empty_string("a", "Name") is None
        assert v.validate_non_empty_string("", "Name") == "Name cannot be empty"
        assert v.validate_non_empty_string(3, "Name") == "Name must be a string"

    def test_string_length(self):
        assert v.validate_string_length("abc", "Title", 1, 3) is None
        assert v.validate_string_length("", "Title", 1, 3) == "Title must be at least 1 character"
        assert v.validate_string_length("abcd", "Title", 1, 3) == "Title must be at most 3 characters"

    def test_trimmed_string(self):
        assert v.validate_non_empty_trimmed_string(" x ", "Text") is None
        assert "whitespace only" in v.validate_non_empty_trimmed_string("   ", "Text")

    def test_pattern(self):
        pattern = re.compile(r"^\d+$")
        assert v.validate_pattern("123", "Code", pattern, "digits") is None
        assert v.validate_pattern("12a", "Code", pattern, "digits") == "Code must match digits"

    def test_id_prefix(self):
        assert v.validate_id("item-1", "Item ID", "item-") is None
        assert v.validate_id("section-1", "Item ID", "item-") == 'Item ID must start with "item-"'


class TestNumberValidators:
    def test_number_rejects_bool_and_nan(self):
        assert v.validate_number(1.5, "Size") is None
        assert v.validate_number(True, "Size") == "Size must be a number"
        assert v.validate_number(math.nan, "Size") == "Size must be a number"
        assert v.validate_number("1", "Size") == "Size must be a number"

    def test_positive_number_allows_zero(self):
        assert v.validate_positive_number(0, "Index") is None
        assert v.validate_positive_number(-1, "Index") == "Index must be a positive number"

    def test_number_range(self):
        assert v.validate_number_range(5, "Level", 1, 10) is None
        assert v.validate_number_range(0, "Level", 1, 10) == "Level must be at least 1"
        assert v.validate_number_range(11, "Level", 1, 10) == "Level must be at most 10"

    def test_timestamp_ordering(self):
        assert v.validate_timestamp(20, "updatedAt", 10, "createdAt") is None
        assert v.validate_timestamp(5, "updatedAt", 10, "createdAt") == "updatedAt cannot be before createdAt"
        assert v.validate_timestamp(5, "updatedAt", "bad", "createdAt") is None


class TestOtherValidators:
    def test_boolean(self):
        assert v.validate_boolean(False, "Flag") is None
        assert v.validate_boolean(0, "Flag") == "Flag must be a boolean"

    def test_list_length(self):
        assert v.validate_list_length([1], "Items", 1, 2) is None
        assert v.validate_list_length([], "Items", min_length=1) == "Items must have at least 1 element"
        assert v.validate_list_length([1, 2, 3], "Items", max_length=2) == "Items must have at most 2 elements"
        assert v.validate_list_length((1,), "Items") == "Items must be a list"

    def test_choice(self):
        assert v.validate_choice("a", "Mode", ["a", "b"]) is None
        assert v.validate_choice("c", "Mode", ["a", "b"]) == 'Mode must be one of: "a", "b"'


class TestHelpers:
    def test_collect_errors_drops_none(self):
        assert v.collect_errors(None, "one", None, "two") == ["one", "two"]

    def test_throw_if_errors(self):
        v.throw_if_errors([], "Item")

        with pytest.raises(v.ValidationError) as exc_info:
            v.throw_if_errors(["a", "b"], "Item")

        assert str(exc_info.value) == "Item validation failed: a, b"
        assert exc_info.value.errors == ["a", "b"]
        assert isinstance(exc_info.value, ValueError)

    def test_sanitize_string(self):
        raw = "  hello<script>alert(1)</script> <IFRAME src=x></IFRAME>world  "
        assert v.sanitize_string(raw) == "hello world"

    def test_truncate_string(self):
        assert v.truncate_string("short", 10) == "short"
        assert v.truncate_string("a long sentence", 8) == "a lon..."
