"""
Bound literal lexing and duration normalization.

A duration bound such as "500milli" or "3h" is split into a magnitude and a
unit suffix, then converted to integer millisecond ticks.
"""

import re
from datetime import timedelta
from fractions import Fraction

from .base_validator import MalformedLiteral

MILLISECOND = 1
MINUTE = 60 * 1000 * MILLISECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR

UNIT_TICKS = {
    "milli": MILLISECOND,
    "m": MINUTE,
    "h": HOUR,
    "d": DAY,
}

_LEADING_DIGITS = re.compile(r"[0-9]+")

_TICK = timedelta(milliseconds=1)
_MICROSECOND = timedelta(microseconds=1)


def split_literal(token: str, field_name: str | None = None) -> tuple[int, str]:
    """
    Split a bound token into its leading magnitude and unit suffix.

    The suffix is returned verbatim; checking that it is a legal unit is the
    grammar's job.

    Args:
        token: Bound token without its bracket ("4milli", "12")
        field_name: Field the token belongs to (for error messages)

    Returns:
        (magnitude, unit) with unit "" for plain numbers

    Raises:
        MalformedLiteral: If the token does not start with a digit

    Examples:
        >>> split_literal("4milli")
        (4, 'milli')
        >>> split_literal("12")
        (12, '')
    """
    match = _LEADING_DIGITS.match(token)
    if match is None:
        raise MalformedLiteral(
            f"bound literal '{token}' does not start with a digit", field_name=field_name
        )
    return int(match.group()), token[match.end():]


def unit_multiplier(unit: str) -> int:
    """Ticks per unit; unknown units count as one tick."""
    return UNIT_TICKS.get(unit, 1)


def to_ticks(token: str, field_name: str | None = None) -> int:
    """
    Convert a duration literal to millisecond ticks.

    >>> to_ticks("3h")
    10800000
    """
    magnitude, unit = split_literal(token, field_name)
    return magnitude * unit_multiplier(unit)


def duration_to_ticks(value: timedelta) -> Fraction:
    """Exact tick count of a timedelta (sub-millisecond parts kept as a fraction)."""
    return Fraction(value // _MICROSECOND, _TICK // _MICROSECOND)
