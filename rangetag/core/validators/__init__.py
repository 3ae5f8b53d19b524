"""
Interval validation building blocks.

Provides the interval grammar, bound parsing, typed comparators,
self-reference substitution and the validators applied to each field.
"""

from .base_validator import (
    AnnotationError,
    BaseValidator,
    IllegalBorder,
    InvalidAnnotationSyntax,
    InvalidFieldValue,
    MalformedLiteral,
    NilField,
    SelfFieldNotFound,
    SelfFieldNotNumeric,
    SelfFieldTypeMismatch,
    TooHigh,
    TooLow,
    UnsupportedFieldType,
    ValidationError,
)
from .comparators import DurationComparator, NumericComparator, comparator_for
from .grammar import check_annotation, is_valid_annotation
from .interval_validator import IntervalValidator, parse_interval, parse_partition
from .literals import split_literal, to_ticks
from .required_field_validator import RequiredValueValidator
from .self_reference import resolve_self_references
from .type_validator import TypeValidator, resolve_value

__all__ = [
    "AnnotationError",
    "InvalidAnnotationSyntax",
    "MalformedLiteral",
    "IllegalBorder",
    "UnsupportedFieldType",
    "ValidationError",
    "TooLow",
    "TooHigh",
    "SelfFieldNotFound",
    "SelfFieldNotNumeric",
    "SelfFieldTypeMismatch",
    "NilField",
    "InvalidFieldValue",
    "BaseValidator",
    "RequiredValueValidator",
    "TypeValidator",
    "IntervalValidator",
    "NumericComparator",
    "DurationComparator",
    "comparator_for",
    "check_annotation",
    "is_valid_annotation",
    "parse_interval",
    "parse_partition",
    "split_literal",
    "to_ticks",
    "resolve_self_references",
    "resolve_value",
]
