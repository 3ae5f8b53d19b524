"""
Self-reference substitution.

An annotation bound may name a sibling field ("[self.C,self.E]"). Each
occurrence is replaced by the sibling's current value before the annotation
is checked against the grammar, so literal and self-referential annotations
are validated the same way.
"""

import math
from fractions import Fraction
from typing import Any

from rangetag.core.models import FieldDescriptor, NumericCategory, RecordView

from .base_validator import (
    InvalidFieldValue,
    NilField,
    SelfFieldNotFound,
    SelfFieldNotNumeric,
    SelfFieldTypeMismatch,
)
from .comparators import number_to_str
from .grammar import SELF_REFERENCE_PATTERN
from .type_validator import resolve_value

RULE_NAME = "self_reference"


def has_self_reference(annotation: str) -> bool:
    return SELF_REFERENCE_PATTERN.search(annotation) is not None


def resolve_self_references(
    field_name: str,
    annotation: str,
    category: NumericCategory,
    record: RecordView,
) -> str:
    """
    Replace every self.<name> token with the named sibling's value.

    The result is built from the original string in one left-to-right pass,
    so a substituted value is never scanned again.

    Args:
        field_name: Field the annotation belongs to
        annotation: Raw annotation
        category: Category of the field the annotation belongs to
        record: The record holding the field and its siblings

    Returns:
        Annotation with all self references substituted

    Raises:
        SelfFieldNotFound: If a referenced name is not a field of the record
        NilField: If a referenced optional field is None
        SelfFieldNotNumeric: If a referenced field is not a number or duration
        SelfFieldTypeMismatch: If integer and float families are mixed
        InvalidFieldValue: If a referenced value is unreadable, not finite,
            or negative where it bounds a duration
    """
    pieces = []
    position = 0
    for match in SELF_REFERENCE_PATTERN.finditer(annotation):
        pieces.append(annotation[position:match.start()])
        pieces.append(_substitute(field_name, category, match.group(1), record))
        position = match.end()
    pieces.append(annotation[position:])
    return "".join(pieces)


def _substitute(field_name: str, category: NumericCategory, name: str, record: RecordView) -> str:
    sibling = record.sibling(name)
    if sibling is None:
        raise SelfFieldNotFound(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=f"self.{name} is not a field of {record.record_type}",
        )
    if sibling.value is None:
        raise NilField(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=f"self.{name} is nil",
        )
    if sibling.category is None or not sibling.category.is_numeric:
        raise SelfFieldNotNumeric(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=f"self.{name} ({sibling.type_name}) cannot be read as a number",
        )
    if sibling.category.family != category.family:
        raise SelfFieldTypeMismatch(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=(
                f"self.{name} is a {sibling.category.family} field "
                f"but {field_name} is a {category.family} field"
            ),
        )

    value = _sibling_value(field_name, sibling)
    if category.is_duration:
        ticks = _whole_ticks(value)
        if ticks < 0:
            raise InvalidFieldValue(
                rule_name=RULE_NAME,
                field_name=field_name,
                message=f"self.{name} is negative ({ticks}) and cannot bound a duration",
            )
        return f"{ticks}milli"
    if category.family == "integer":
        return str(_whole_ticks(value))
    value = float(value)
    if not math.isfinite(value):
        raise InvalidFieldValue(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=f"self.{name} is not a finite number ({value!r})",
        )
    return number_to_str(value)


def _sibling_value(field_name: str, sibling: FieldDescriptor) -> Any:
    try:
        return resolve_value(sibling.category, sibling.value)
    except (TypeError, ValueError) as e:
        raise InvalidFieldValue(
            rule_name=RULE_NAME,
            field_name=field_name,
            message=f"self.{sibling.name} holds an unreadable value: {e}",
        ) from e


def _whole_ticks(value: Any) -> int:
    # Sub-millisecond parts of a duration sibling are floored
    if isinstance(value, Fraction):
        return value.numerator // value.denominator
    return int(value)
