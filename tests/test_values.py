"""Tests for capcheck.values — structural equality and non-blank predicates."""

from __future__ import annotations

import pytest

from capcheck.values import is_non_blank, values_equal


class TestValuesEqual:
    @pytest.mark.parametrize(
        ("actual", "expected"),
        [
            (None, None),
            ("OSS", "OSS"),
            (1, 1.0),
            (True, True),
            ([1, "a"], [1, "a"]),
            ({"a": [1, 2]}, {"a": [1, 2]}),
            ((1, 2), [1, 2]),
        ],
    )
    def test_equal(self, actual: object, expected: object) -> None:
        assert values_equal(actual, expected)

    @pytest.mark.parametrize(
        ("actual", "expected"),
        [
            (None, "OSS"),
            ("OSS", None),
            ("oss", "OSS"),
            ("1", 1),
            (True, 1),
            (0, False),
            ([1, 2], [2, 1]),
            ([1], [1, 1]),
            ({"a": 1}, {"a": 1, "b": 2}),
            ({"a": True}, {"a": 1}),
            ("x", ["x"]),
        ],
    )
    def test_not_equal(self, actual: object, expected: object) -> None:
        assert not values_equal(actual, expected)


class TestIsNonBlank:
    @pytest.mark.parametrize("value", ["x", " x ", 0, False, 3.5, ["a"], {}, {"k": "v"}])
    def test_present(self, value: object) -> None:
        assert is_non_blank(value)

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n", [], ()])
    def test_blank(self, value: object) -> None:
        assert not is_non_blank(value)
