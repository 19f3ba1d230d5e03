"""Strict integer parsing for form fields, query parameters and path ids.

Accepts an optional sign followed by ASCII digits, inside the signed 64-bit
range. Whitespace, underscores, decimal points and non-ASCII digits are
refused, unlike the built-in int().
"""

import re

INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_int64(raw: str) -> int | None:
    """Return the integer value of `raw`, or None when it is not one."""
    if not _INTEGER_RE.fullmatch(raw):
        return None
    value = int(raw)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value
