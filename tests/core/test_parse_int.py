"""Strict integer parsing used for ages, query parameters and path ids."""

import pytest

from userbook.core.parse_int import INT64_MAX, INT64_MIN, parse_int64


@pytest.mark.parametrize("raw,expected", [
    ("0", 0), ("42", 42), ("+5", 5), ("-5", -5), ("007", 7),
    (str(INT64_MAX), INT64_MAX), (str(INT64_MIN), INT64_MIN),
])
def test_parses_integers(raw, expected):
    assert parse_int64(raw) == expected


@pytest.mark.parametrize("raw", [
    "", " ", "+", "-", "1 ", " 1", "1_0", "1.0", "0x10", "١",
    str(INT64_MAX + 1), str(INT64_MIN - 1),
])
def test_refuses_non_integers(raw):
    assert parse_int64(raw) is None
