"""
NumericCategory - the representation family a field is compared in.
"""

from enum import Enum


class NumericCategory(str, Enum):
    """
    Representation family of an annotated field.

    Chosen once per field from its declared type. DURATION_TICKS fields are
    checked against the duration grammar, every other category against the
    numeric grammar.
    """

    SIGNED_INTEGER = "int"
    UNSIGNED_INTEGER = "uint"
    FLOAT = "float"
    DURATION_TICKS = "duration"
    STRING_LENGTH = "str"

    @property
    def is_duration(self) -> bool:
        return self is NumericCategory.DURATION_TICKS

    @property
    def family(self) -> str:
        """'float' for FLOAT, 'integer' for everything resolving to whole ticks."""
        return "float" if self is NumericCategory.FLOAT else "integer"

    @property
    def is_numeric(self) -> bool:
        """Whether a field of this category may be the target of a self reference."""
        return self is not NumericCategory.STRING_LENGTH
