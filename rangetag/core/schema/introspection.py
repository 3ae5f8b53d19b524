"""
Record introspection: turns a record instance into a RecordView.

Supported records:
- dataclass instances (annotations via typing.Annotated or field metadata)
- pydantic model instances (typing.Annotated or Field(json_schema_extra=...))
- mappings, described by a RecordSchema

Declared types map to numeric categories:

    bool       -> unsupported
    int        -> SIGNED_INTEGER   (UNSIGNED_INTEGER with the Unsigned marker)
    float      -> FLOAT
    timedelta  -> DURATION_TICKS
    str        -> STRING_LENGTH

Optional[T] / T | None is one level of indirection: the field may be None.
Dataclass and pydantic model types are nested records.
"""

import dataclasses
import types
import typing
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from rangetag.core.models import FieldDescriptor, NumericCategory, RecordSchema, RecordView
from rangetag.observability.logger import get_logger

from .markers import ANNOTATION_KEY, Interval, Unsigned

logger = get_logger(__name__)


class UnsupportedRecordType(TypeError):
    """Raised when a value cannot be described as a record."""


def unwrap_type(declared: Any) -> tuple[Any, list[Any], bool]:
    """
    Strip Annotated and Optional wrappers from a declared type.

    Returns:
        (inner type, collected Annotated metadata, whether None is allowed)
    """
    metadata: list[Any] = []
    optional = False
    tp = declared
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            metadata.extend(tp.__metadata__)
            tp = get_args(tp)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(tp)
            members = [arg for arg in args if arg is not type(None)]
            if len(members) == 1 and len(members) < len(args):
                optional = True
                tp = members[0]
                continue
        return tp, metadata, optional


def category_of(tp: Any, metadata: Iterable[Any] = ()) -> NumericCategory | None:
    """Numeric category of an unwrapped type, None if it cannot be compared."""
    if not isinstance(tp, type) or issubclass(tp, bool):
        return None
    if issubclass(tp, int):
        if any(isinstance(item, Unsigned) for item in metadata):
            return NumericCategory.UNSIGNED_INTEGER
        return NumericCategory.SIGNED_INTEGER
    if issubclass(tp, float):
        return NumericCategory.FLOAT
    if issubclass(tp, timedelta):
        return NumericCategory.DURATION_TICKS
    if issubclass(tp, str):
        return NumericCategory.STRING_LENGTH
    return None


def is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def describe_record(record: Any, schema: RecordSchema | None = None, path: str = "") -> RecordView:
    """
    Describe every field of a record instance.

    Args:
        record: Dataclass instance, pydantic model instance or mapping
        schema: Field layout, required for mappings and ignored otherwise
        path: Dotted path of the record inside an enclosing record

    Returns:
        RecordView with one FieldDescriptor per field, in declaration order

    Raises:
        UnsupportedRecordType: If the value is not a supported record
    """
    if isinstance(record, BaseModel):
        return _describe_model(record, path)
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return _describe_dataclass(record, path)
    if isinstance(record, Mapping):
        if schema is None:
            raise UnsupportedRecordType("mapping records need a RecordSchema describing their fields")
        return _describe_mapping(record, schema, path)
    raise UnsupportedRecordType(
        f"cannot validate {type(record).__name__}: expected a dataclass, pydantic model or mapping"
    )


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        # Forward references to names that are not importable (local classes)
        logger.debug(f"Falling back to raw field types for {cls.__name__}: {e}")
        return {}


def _describe_dataclass(record: Any, path: str) -> RecordView:
    hints = _type_hints(type(record))
    fields = [
        _describe_field(
            name=field.name,
            declared=hints.get(field.name, field.type),
            value=getattr(record, field.name),
            path=path,
            annotation=field.metadata.get(ANNOTATION_KEY),
        )
        for field in dataclasses.fields(record)
    ]
    return RecordView(record_type=type(record).__name__, path=path, fields=fields)


def _describe_model(record: BaseModel, path: str) -> RecordView:
    fields = []
    for name, info in type(record).model_fields.items():
        extra = info.json_schema_extra
        annotation = extra.get(ANNOTATION_KEY) if isinstance(extra, dict) else None
        fields.append(
            _describe_field(
                name=name,
                declared=info.annotation,
                value=getattr(record, name),
                path=path,
                annotation=annotation,
                extra_metadata=info.metadata,
            )
        )
    return RecordView(record_type=type(record).__name__, path=path, fields=fields)


def _describe_mapping(record: Mapping, schema: RecordSchema, path: str) -> RecordView:
    fields = []
    for name, spec in schema.fields.items():
        field_path = _join(path, name)
        value = record.get(name)
        if spec.type == "record":
            fields.append(
                FieldDescriptor(
                    name=name,
                    path=field_path,
                    type_name="record",
                    annotation=spec.valid,
                    value=value,
                    optional=True,
                    is_record=True,
                    record_schema=RecordSchema(name=name, fields=spec.fields),
                )
            )
        else:
            fields.append(
                FieldDescriptor(
                    name=name,
                    path=field_path,
                    type_name=spec.type,
                    category=NumericCategory(spec.type),
                    annotation=spec.valid,
                    value=value,
                    optional=True,
                )
            )
    return RecordView(record_type=schema.name, path=path, fields=fields)


def _describe_field(
    name: str,
    declared: Any,
    value: Any,
    path: str,
    annotation: str | None = None,
    extra_metadata: Iterable[Any] = (),
) -> FieldDescriptor:
    tp, metadata, optional = unwrap_type(declared)
    metadata = [*extra_metadata, *metadata]
    if annotation is None:
        annotation = _annotation_from_metadata(metadata)

    if is_record_type(tp):
        return FieldDescriptor(
            name=name,
            path=_join(path, name),
            type_name=tp.__name__,
            annotation=annotation,
            value=value,
            optional=optional,
            is_record=True,
        )
    return FieldDescriptor(
        name=name,
        path=_join(path, name),
        type_name=getattr(tp, "__name__", repr(tp)),
        category=category_of(tp, metadata),
        annotation=annotation,
        value=value,
        optional=optional,
    )


def _annotation_from_metadata(metadata: Iterable[Any]) -> str | None:
    annotation = None
    for item in metadata:
        if isinstance(item, Interval):
            annotation = item.annotation
    return annotation


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name
