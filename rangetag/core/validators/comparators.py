"""
Typed comparators used to evaluate a field value against one bound.

NumericComparator works on decimal strings. Both sides are parsed into a
single representation before comparing, probing in this order:

1. unsigned 64-bit, if both sides parse as unsigned
2. 64-bit float, if both sides parse as float
3. signed 64-bit, with unparseable input read as 0

Fields declared as integers try exact signed 64-bit between steps 1 and 2,
so a negative bound never forces large integers through float64.

DurationComparator compares millisecond ticks.
"""

import math
import re
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any

from rangetag.core.models import NumericCategory

from .literals import to_ticks

UINT64_MAX = 2**64 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_UNSIGNED = re.compile(r"[0-9]+")
_SIGNED = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


def to_uint64(text: str) -> int | None:
    """Parse an unsigned 64-bit integer, None if text is not one."""
    if not _UNSIGNED.fullmatch(text):
        return None
    value = int(text)
    if value > UINT64_MAX:
        return None
    return value


def to_float64(text: str) -> float | None:
    """Parse a 64-bit float, None if text is not one or overflows."""
    if not _FLOAT.fullmatch(text):
        return None
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        return None
    return value


def to_signed64(text: str) -> int | None:
    """Parse a signed 64-bit integer, None if text is not one."""
    if not _SIGNED.fullmatch(text):
        return None
    value = int(text)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


def to_int64(text: str) -> int:
    """Parse a signed 64-bit integer; anything unparseable reads as 0."""
    value = to_signed64(text)
    return 0 if value is None else value


def number_to_str(value: Any) -> str:
    """Decimal string form of a resolved numeric value."""
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric value")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Fraction):
        if value.denominator == 1:
            return str(value.numerator)
        return repr(float(value))
    raise TypeError(f"cannot format {type(value).__name__} as a number")


def parse_pair(control: str, target: str) -> tuple[Any, Any]:
    """Parse both sides into the first representation they both fit."""
    c, t = to_uint64(control), to_uint64(target)
    if c is not None and t is not None:
        return c, t
    cf, tf = to_float64(control), to_float64(target)
    if cf is not None and tf is not None:
        return cf, tf
    return to_int64(control), to_int64(target)


def parse_integer_pair(control: str, target: str) -> tuple[Any, Any]:
    """parse_pair for integer fields: exact signed 64-bit is tried before float."""
    c, t = to_uint64(control), to_uint64(target)
    if c is not None and t is not None:
        return c, t
    c, t = to_signed64(control), to_signed64(target)
    if c is not None and t is not None:
        return c, t
    return parse_pair(control, target)


class Comparator(ABC):
    """
    Compares a field value (control) against a bound literal (target).
    """

    @abstractmethod
    def _pair(self, control: Any, target: str) -> tuple[Any, Any]:
        pass

    def lt(self, control: Any, target: str) -> bool:
        c, t = self._pair(control, target)
        return c < t

    def le(self, control: Any, target: str) -> bool:
        c, t = self._pair(control, target)
        return c <= t

    def ge(self, control: Any, target: str) -> bool:
        c, t = self._pair(control, target)
        return c >= t

    def gt(self, control: Any, target: str) -> bool:
        c, t = self._pair(control, target)
        return c > t

    def compare(self, operator: str, control: Any, target: str) -> bool:
        """Evaluate one of "<", "<=", ">=", ">"."""
        return self.OPERATORS[operator](self, control, target)

    OPERATORS = {
        "<": lt,
        "<=": le,
        ">=": ge,
        ">": gt,
    }


class NumericComparator(Comparator):
    """Integer, float and string-length fields."""

    def __init__(self, exact_integers: bool = False):
        self.exact_integers = exact_integers

    def _pair(self, control: Any, target: str) -> tuple[Any, Any]:
        if not isinstance(control, str):
            control = number_to_str(control)
        if self.exact_integers:
            return parse_integer_pair(control, target)
        return parse_pair(control, target)


class DurationComparator(Comparator):
    """timedelta fields; control is already in ticks, target is a duration literal."""

    def _pair(self, control: Any, target: str) -> tuple[Any, Any]:
        if isinstance(control, str):
            control = to_ticks(control)
        return control, to_ticks(target)


_NUMERIC = NumericComparator()
_INTEGER = NumericComparator(exact_integers=True)
_DURATION = DurationComparator()


def comparator_for(category: NumericCategory) -> Comparator:
    """Comparator for a field category (comparators are stateless and shared)."""
    if category.is_duration:
        return _DURATION
    if category in (NumericCategory.SIGNED_INTEGER, NumericCategory.UNSIGNED_INTEGER):
        return _INTEGER
    return _NUMERIC
