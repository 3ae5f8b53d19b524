"""
Core data models for the interval validation engine.

All models use Pydantic for runtime validation and type safety.
"""

from .field_descriptor import FieldDescriptor, RecordView
from .interval import Bound, BoundaryKind, IntervalSpec, Side
from .numeric_category import NumericCategory
from .record_schema import FieldSpec, RecordSchema
from .validation_result import FieldFailure, ValidationVerdict

__all__ = [
    "NumericCategory",
    "Side",
    "BoundaryKind",
    "Bound",
    "IntervalSpec",
    "FieldDescriptor",
    "RecordView",
    "FieldSpec",
    "RecordSchema",
    "FieldFailure",
    "ValidationVerdict",
]
