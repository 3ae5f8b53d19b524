"""
TypeValidator - reads a runtime value in its field's numeric category.
"""

import math
import re
from datetime import timedelta
from fractions import Fraction
from typing import Any

from rangetag.core.models import NumericCategory

from .base_validator import BaseValidator, InvalidFieldValue
from .grammar import is_duration_literal
from .literals import duration_to_ticks, to_ticks

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def resolve_value(category: NumericCategory, value: Any) -> Any:
    """
    Coerce a runtime value to the representation its category compares in.

    - SIGNED_INTEGER / UNSIGNED_INTEGER: int (numeric strings accepted)
    - FLOAT: float
    - DURATION_TICKS: millisecond ticks; timedelta, a number of milliseconds
      or a duration literal ("3h")
    - STRING_LENGTH: len(value)

    Raises:
        TypeError: If the value has the wrong type for the category
        ValueError: If the value has the right type but an unusable content
    """
    # bool is an int subclass but never a number here
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric value")

    if category is NumericCategory.STRING_LENGTH:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        return len(value)

    if category is NumericCategory.DURATION_TICKS:
        if isinstance(value, timedelta):
            return duration_to_ticks(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"{value!r} is not a finite duration")
            return Fraction(value)
        if isinstance(value, str):
            if not is_duration_literal(value):
                raise ValueError(f"'{value}' is not a duration literal")
            return to_ticks(value)
        raise TypeError(f"expected timedelta, got {type(value).__name__}")

    if category is NumericCategory.FLOAT:
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return float(value)
        raise TypeError(f"expected float, got {type(value).__name__}")

    # Signed and unsigned integers
    if isinstance(value, str):
        if not _INTEGER_TEXT.fullmatch(value.strip()):
            raise ValueError(f"'{value}' is not an integer")
        value = int(value)
    if not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    if category is NumericCategory.UNSIGNED_INTEGER and value < 0:
        raise ValueError(f"negative value {value} for an unsigned field")
    return value


class TypeValidator(BaseValidator):
    """
    Validates that a field value can be read in the field's numeric category.

    Parameters:
    - category: NumericCategory (or its string value, e.g. "uint")

    Mapping records loaded from JSON carry untyped values ("3h", "12");
    dataclass and pydantic records already hold typed values.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        category = self.parameters.get("category")
        if category is None:
            raise ValueError("TypeValidator requires 'category' parameter")
        self.category = NumericCategory(category)

    def validate(self, value: Any, record: Any) -> None:
        """
        Validate that the value can be read in the expected category.

        Args:
            value: The field value to validate
            record: The RecordView (unused)

        Raises:
            ValidationError: If the value cannot be read as the category
        """
        # Skip validation for None (handled by required_value validator)
        if value is None:
            return
        self.resolve(value)

    def resolve(self, value: Any) -> Any:
        """Resolved value, raising InvalidFieldValue instead of TypeError/ValueError."""
        try:
            return resolve_value(self.category, value)
        except (TypeError, ValueError) as e:
            raise InvalidFieldValue(
                rule_name="type_check",
                field_name=self.field_name,
                message=f"Cannot read {type(value).__name__} as {self.category.value}: {e}",
            ) from e

    @property
    def rule_type(self) -> str:
        return "type_check"
