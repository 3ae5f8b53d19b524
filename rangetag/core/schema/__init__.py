"""
Record introspection and interval annotation markers.
"""

from .introspection import (
    UnsupportedRecordType,
    category_of,
    describe_record,
    unwrap_type,
)
from .markers import ANNOTATION_KEY, Interval, UInt, Unsigned

__all__ = [
    "ANNOTATION_KEY",
    "Interval",
    "Unsigned",
    "UInt",
    "UnsupportedRecordType",
    "describe_record",
    "category_of",
    "unwrap_type",
]
