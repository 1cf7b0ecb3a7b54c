"""Predicates over loosely-typed configuration values.

Configuration blocks arrive as decoded JSON/YAML: strings, numbers,
booleans, lists, nested mappings, or ``None``.  Both the declarative field
rules and the custom validators judge these values through the two
functions here.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Number


def values_equal(actual: object, expected: object) -> bool:
    """Return True if *actual* structurally equals *expected*.

    ``None`` only equals ``None``.  Booleans only equal booleans, so
    ``True`` never matches ``1``.  Numbers compare by value (``1 == 1.0``)
    while strings never match numbers.  Lists and mappings are compared
    element by element with the same rules.
    """
    if actual is None or expected is None:
        return actual is None and expected is None

    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected

    if isinstance(actual, Number) or isinstance(expected, Number):
        return isinstance(actual, Number) and isinstance(expected, Number) and actual == expected

    if isinstance(actual, Mapping) or isinstance(expected, Mapping):
        if not (isinstance(actual, Mapping) and isinstance(expected, Mapping)):
            return False
        if actual.keys() != expected.keys():
            return False
        return all(values_equal(actual[key], expected[key]) for key in actual)

    if isinstance(actual, (list, tuple)) or isinstance(expected, (list, tuple)):
        if not (isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple))):
            return False
        if len(actual) != len(expected):
            return False
        return all(values_equal(a, e) for a, e in zip(actual, expected))

    return actual == expected


def is_non_blank(value: object) -> bool:
    """Return True if *value* counts as a filled-in field.

    Blank means ``None``, a whitespace-only string, or an empty list.
    Numbers, booleans, and nested mappings are filled in once non-null.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True
