"""
Interval annotation configuration for mapping records.

Loads record schemas (field types and interval annotations) from YAML files
and provides a builder for constructing them in code.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from rangetag.core.models import FieldSpec, RecordSchema
from rangetag.utils.validation import validate_field_identifier

FIELD_TYPES = ("int", "uint", "float", "duration", "str", "record")


class RuleConfigLoader:
    """
    Loads record schemas from YAML configuration files.

    Expected YAML format (annotations must be quoted, "[1,3)" is not YAML):
    ```yaml
    records:
      Param:
        A: {type: int, valid: "[1,3)"}
        B: {type: float, valid: "[~,3.3)"}
        C: {type: uint, valid: "[2,45435]"}
        D: {type: duration, valid: "[500milli,3h]"}
        E: uint
        F: {type: uint, valid: "[self.C,self.E]"}
        limits:
          type: record
          fields:
            retries: {type: int, valid: "[0,10]"}
    ```
    A bare type name ("E: uint") declares an unconstrained field.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_schemas(self) -> dict[str, RecordSchema]:
        """
        Load and parse record schemas from the YAML file.

        Returns:
            Record name to RecordSchema

        Raises:
            ValueError: If YAML is invalid or a field definition is malformed
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "records" not in config:
            raise ValueError("Configuration file must contain 'records' section")

        records = config["records"]
        if not isinstance(records, dict):
            raise ValueError("'records' must map record names to field definitions")

        return {
            validate_field_identifier(name, "record name"): self._parse_record(name, fields)
            for name, fields in records.items()
        }

    def load_schema(self, record_name: str) -> RecordSchema:
        """Load a single record schema by name."""
        schemas = self.load_schemas()
        if record_name not in schemas:
            raise KeyError(
                f"Record '{record_name}' not found in {self.config_path}. "
                f"Available: {', '.join(sorted(schemas)) or 'none'}"
            )
        return schemas[record_name]

    def _parse_record(self, record_name: str, field_defs: Any) -> RecordSchema:
        fields = self._parse_fields(record_name, field_defs)
        return RecordSchema(name=record_name, fields=fields)

    def _parse_fields(self, record_name: str, field_defs: Any) -> dict[str, FieldSpec]:
        if not isinstance(field_defs, dict) or not field_defs:
            raise ValueError(f"Fields of record '{record_name}' must be a non-empty mapping")
        return {
            validate_field_identifier(name, f"field of '{record_name}'"): self._parse_field(record_name, name, field_def)
            for name, field_def in field_defs.items()
        }

    def _parse_field(self, record_name: str, field_name: str, field_def: Any) -> FieldSpec:
        """
        Parse a single field definition.

        Args:
            record_name: The record this field belongs to
            field_name: The field name
            field_def: Either a bare type name or a mapping with type/valid/fields

        Returns:
            Parsed FieldSpec

        Raises:
            ValueError: If the field definition is invalid
        """
        if isinstance(field_def, str):
            field_def = {"type": field_def}
        if not isinstance(field_def, dict):
            raise ValueError(f"Field '{record_name}.{field_name}' must be a type name or a mapping")
        if "type" not in field_def:
            raise ValueError(f"Field '{record_name}.{field_name}' is missing 'type'")
        if field_def["type"] not in FIELD_TYPES:
            raise ValueError(
                f"Invalid type '{field_def['type']}' for field '{record_name}.{field_name}'. "
                f"Must be one of {', '.join(FIELD_TYPES)}"
            )

        valid = field_def.get("valid")
        if valid is not None and not isinstance(valid, str):
            raise ValueError(
                f"Interval of '{record_name}.{field_name}' must be a quoted string, got {valid!r}"
            )

        nested = None
        if field_def["type"] == "record":
            nested = self._parse_fields(f"{record_name}.{field_name}", field_def.get("fields"))

        try:
            return FieldSpec(type=field_def["type"], valid=valid, fields=nested)
        except PydanticValidationError as e:
            raise ValueError(f"Invalid field '{record_name}.{field_name}': {e}") from e


class RuleConfigBuilder:
    """
    Programmatically build record schemas (for testing or dynamic rules).
    """

    def __init__(self, record_name: str):
        """Initialize an empty schema for one record type."""
        self.record_name = validate_field_identifier(record_name, "record name")
        self.fields: dict[str, FieldSpec] = {}

    def add_field(self, field_name: str, field_type: str, valid: str | None = None) -> "RuleConfigBuilder":
        """Add a field of any scalar type."""
        if field_type not in FIELD_TYPES or field_type == "record":
            raise ValueError(f"Invalid field type '{field_type}'")
        self.fields[validate_field_identifier(field_name, "field name")] = FieldSpec(type=field_type, valid=valid)
        return self

    def add_int(self, field_name: str, valid: str | None = None) -> "RuleConfigBuilder":
        return self.add_field(field_name, "int", valid)

    def add_uint(self, field_name: str, valid: str | None = None) -> "RuleConfigBuilder":
        return self.add_field(field_name, "uint", valid)

    def add_float(self, field_name: str, valid: str | None = None) -> "RuleConfigBuilder":
        return self.add_field(field_name, "float", valid)

    def add_duration(self, field_name: str, valid: str | None = None) -> "RuleConfigBuilder":
        return self.add_field(field_name, "duration", valid)

    def add_string(self, field_name: str, valid: str | None = None) -> "RuleConfigBuilder":
        return self.add_field(field_name, "str", valid)

    def add_record(self, field_name: str, schema: RecordSchema) -> "RuleConfigBuilder":
        """Add a nested record field laid out by another schema."""
        self.fields[validate_field_identifier(field_name, "field name")] = FieldSpec(
            type="record", fields=dict(schema.fields)
        )
        return self

    def build(self) -> RecordSchema:
        """Build and return the record schema."""
        if not self.fields:
            raise ValueError(f"Record '{self.record_name}' has no fields")
        return RecordSchema(name=self.record_name, fields=dict(self.fields))
