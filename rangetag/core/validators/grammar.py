"""
Interval grammars.

Patterns are compiled once at import and only read afterwards, so they can
be shared by threads validating different records.

Numeric:   [lo,hi]  (lo,hi)  [lo,hi)  (lo,hi]   lo/hi = signed decimal or "~"
Duration:  same brackets, lo/hi = <digits><milli|m|h|d>, no sign
"""

import re

from rangetag.core.models import NumericCategory

from .base_validator import InvalidAnnotationSyntax

UNBOUNDED = "~"

NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
NUMERIC_BOUND = rf"(?:{NUMBER}|~)"
DURATION_BOUND = r"\d+(?:milli|[mdh])"


def _interval(bound: str) -> str:
    return rf"^[\[(]\s*{bound}\s*,\s*{bound}\s*[\])]$"


NUMERIC_PATTERN = re.compile(_interval(NUMERIC_BOUND), re.ASCII)
DURATION_PATTERN = re.compile(_interval(DURATION_BOUND), re.ASCII)
DURATION_LITERAL_PATTERN = re.compile(DURATION_BOUND, re.ASCII)
SELF_REFERENCE_PATTERN = re.compile(r"self\.(\w+)", re.ASCII)


def pattern_for(category: NumericCategory) -> re.Pattern:
    """Grammar that annotations of fields in this category must match."""
    if category.is_duration:
        return DURATION_PATTERN
    return NUMERIC_PATTERN


def is_valid_annotation(annotation: str, category: NumericCategory) -> bool:
    return pattern_for(category).fullmatch(annotation) is not None


def check_annotation(field_name: str, annotation: str, category: NumericCategory) -> None:
    """
    Check an annotation against the grammar of the field's category.

    Args:
        field_name: Field the annotation is attached to
        annotation: Annotation with self references already substituted
        category: The field's numeric category

    Raises:
        InvalidAnnotationSyntax: If the annotation does not match the grammar
    """
    if not is_valid_annotation(annotation, category):
        grammar = "duration" if category.is_duration else "numeric"
        raise InvalidAnnotationSyntax(
            f"invalid {grammar} interval '{annotation}'",
            field_name=field_name,
            annotation=annotation,
        )


def is_duration_literal(text: str) -> bool:
    """Whether text is a single duration literal such as "3h"."""
    return DURATION_LITERAL_PATTERN.fullmatch(text) is not None
