"""
RecordSchema model describing plain mapping records (dicts loaded from JSON/YAML).

Dataclasses and pydantic models declare their field types in code; a mapping
has no declared types, so its fields are described by a RecordSchema.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

FieldType = Literal["int", "uint", "float", "duration", "str", "record"]


class FieldSpec(BaseModel):
    """
    Declared type and interval annotation of one mapping field.

    Attributes:
        type: "int", "uint", "float", "duration", "str" or "record"
        valid: Interval annotation ("[1,3)"), None when the field is not constrained
        fields: Sub-fields when type is "record"
    """

    type: FieldType
    valid: str | None = None
    fields: dict[str, "FieldSpec"] | None = None

    @model_validator(mode="after")
    def check_record_fields(self):
        if self.type == "record" and not self.fields:
            raise ValueError("record fields require a 'fields' mapping")
        if self.type != "record" and self.fields:
            raise ValueError(f"'fields' is only allowed on record fields, not {self.type}")
        return self


class RecordSchema(BaseModel):
    """
    Field layout of a mapping record.

    Attributes:
        name: Record type name used in verdicts, logs and metrics
        fields: Field name to FieldSpec, in declaration order
    """

    name: str = Field(..., min_length=1)
    fields: dict[str, FieldSpec]

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Param",
                "fields": {
                    "A": {"type": "int", "valid": "[1,3)"},
                    "D": {"type": "duration", "valid": "[500milli,3h]"},
                    "E": {"type": "uint"},
                    "F": {"type": "uint", "valid": "[self.C,self.E]"},
                },
            }
        }
