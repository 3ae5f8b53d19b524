"""
FieldDescriptor and RecordView: what the record walker hands to the validators.

The validators never introspect records themselves; they only see these
descriptors, so any record kind can be validated once it can be described.
"""

from typing import Any

from pydantic import BaseModel, Field

from .numeric_category import NumericCategory
from .record_schema import RecordSchema


class FieldDescriptor(BaseModel):
    """
    One field of a record instance.

    Attributes:
        name: Field name
        path: Dotted path from the top-level record ("inner.count")
        type_name: Declared type, for messages
        category: Numeric category, None for nested records and unsupported types
        annotation: Raw interval annotation, None when the field is not constrained
        value: Current runtime value (None for an unset optional field)
        optional: Whether the declared type allows None (one level of indirection)
        is_record: Whether the field holds a nested record
        record_schema: Schema of a nested mapping record
    """

    name: str
    path: str
    type_name: str
    category: NumericCategory | None = None
    annotation: str | None = None
    value: Any = None
    optional: bool = False
    is_record: bool = False
    record_schema: RecordSchema | None = None

    @property
    def is_annotated(self) -> bool:
        return bool(self.annotation)

    class Config:
        frozen = True
        arbitrary_types_allowed = True


class RecordView(BaseModel):
    """
    Read-only snapshot of one record's fields, in declaration order.

    Attributes:
        record_type: Name of the record's type
        path: Dotted path of this record inside the top-level record ("" at the top)
        fields: Field descriptors
    """

    record_type: str
    path: str = ""
    fields: list[FieldDescriptor] = Field(default_factory=list)

    def sibling(self, name: str) -> FieldDescriptor | None:
        """Direct field lookup by name (never descends into nested records)."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    @property
    def annotated_fields(self) -> list[FieldDescriptor]:
        return [descriptor for descriptor in self.fields if descriptor.is_annotated]

    class Config:
        frozen = True
        arbitrary_types_allowed = True
