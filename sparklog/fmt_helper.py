"""Helpers for zero-padded numbers and sub-second time fractions."""

from __future__ import annotations

NANOSECONDS = 1
MICROSECONDS = 1_000
MILLISECONDS = 1_000_000
SECONDS = 1_000_000_000


def count_digits(n: int) -> int:
    """Number of decimal digits of a non-negative integer (1 for zero)."""
    if n < 0:
        raise ValueError("count_digits expects a non-negative integer")
    return len(str(n))


def pad2(n: int) -> str:
    """Format ``n`` with at least two digits, zero padded."""
    if n > 99:
        return str(n)
    return f"{n:02}"


def pad_uint(n: int, width: int) -> str:
    """Zero-pad a non-negative integer to ``width`` digits."""
    if n < 0:
        raise ValueError("pad_uint expects a non-negative integer")
    digits = str(n)
    if width > len(digits):
        return "0" * (width - len(digits)) + digits
    return digits


def pad3(n: int) -> str:
    return pad_uint(n, 3)


def pad6(n: int) -> str:
    return pad_uint(n, 6)


def pad9(n: int) -> str:
    return pad_uint(n, 9)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def time_fraction(time_ns: int, unit_ns: int) -> int:
    """Return the sub-second part of ``time_ns`` counted in units of ``unit_ns``."""
    if unit_ns <= 0:
        raise ValueError("unit must be positive")
    whole_seconds_ns = _trunc_div(time_ns, SECONDS) * SECONDS
    return _trunc_div(time_ns, unit_ns) - _trunc_div(whole_seconds_ns, unit_ns)