"""
Record validator orchestrating interval checks over the fields of a record.

The validator walks a record (recursing into nested records), applies the
field validators to every annotated field and produces a ValidationVerdict.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from rangetag.core.models import (
    FieldDescriptor,
    FieldFailure,
    RecordSchema,
    RecordView,
    ValidationVerdict,
)
from rangetag.core.schema import UnsupportedRecordType, describe_record
from rangetag.core.validators import (
    AnnotationError,
    BaseValidator,
    IntervalValidator,
    InvalidFieldValue,
    RequiredValueValidator,
    UnsupportedFieldType,
    ValidationError,
)
from rangetag.observability.logger import get_logger
from rangetag.observability.metrics import (
    record_annotation_error,
    record_verdict,
    time_validation,
)
from rangetag.settings import ValidatorSettings

logger = get_logger(__name__)

NIL_POLICIES = ("fail", "skip")


class RecordValidationError(ValueError):
    """Raised by ensure_valid() when a record has failing fields."""

    def __init__(self, verdict: ValidationVerdict):
        self.verdict = verdict
        super().__init__(f"{verdict.record_type} failed validation: {verdict.error_message()}")


class RecordValidator:
    """
    Validates every annotated field of a record against its interval.

    Annotations are re-parsed on every call; nothing is cached between records.
    Failures of well-formed annotations are collected into the verdict
    (all of them, or only the first with fail_fast). Broken annotations raise
    an AnnotationError.
    """

    def __init__(self, fail_fast: bool = False, nil_policy: str = "fail"):
        """
        Initialize the record validator.

        Args:
            fail_fast: Stop at the first failing field
            nil_policy: "fail" reports annotated fields holding None as NilField,
                        "skip" treats their interval as inapplicable
        """
        if nil_policy not in NIL_POLICIES:
            raise ValueError(f"Unknown nil policy '{nil_policy}'. Must be one of {NIL_POLICIES}")
        self.fail_fast = fail_fast
        self.nil_policy = nil_policy

    @classmethod
    def from_settings(cls, settings: ValidatorSettings) -> "RecordValidator":
        return cls(fail_fast=settings.fail_fast, nil_policy=settings.nil_policy)

    def validate_record(self, record: Any, schema: RecordSchema | None = None) -> ValidationVerdict:
        """
        Validate a record against the intervals declared on its fields.

        Args:
            record: Dataclass instance, pydantic model instance or mapping
            schema: Field layout, required when record is a mapping

        Returns:
            ValidationVerdict listing every failing field

        Raises:
            AnnotationError: If an annotation or annotated field declaration is broken
            UnsupportedRecordType: If record is not a supported record
        """
        view = describe_record(record, schema)
        checked: list[str] = []
        failures: list[FieldFailure] = []

        with time_validation(view.record_type):
            try:
                for failure in self._iter_failures(view, checked):
                    failures.append(failure)
                    if self.fail_fast:
                        break
            except AnnotationError as e:
                logger.error(
                    f"Broken interval declaration on {view.record_type}: {e}",
                    extra={"record_type": view.record_type, "error_type": type(e).__name__},
                )
                record_annotation_error(view.record_type, type(e).__name__)
                raise

        passed = len(failures) == 0
        record_verdict(view.record_type, passed, [(f.field_name, f.reason) for f in failures])
        if not passed:
            logger.warning(
                f"{view.record_type} failed validation on {len(failures)} field(s)",
                extra={"record_type": view.record_type, "failed_fields": [f.path for f in failures]},
            )

        return ValidationVerdict(
            record_type=view.record_type,
            passed=passed,
            failures=failures,
            checked_fields=checked,
        )

    def validate_batch(
        self, records: Iterable[Any], schema: RecordSchema | None = None
    ) -> list[ValidationVerdict]:
        """
        Validate a batch of records.

        Args:
            records: Records of the same kind
            schema: Field layout, required when the records are mappings

        Returns:
            List of ValidationVerdict objects, one per record
        """
        return [self.validate_record(record, schema) for record in records]

    def ensure_valid(self, record: Any, schema: RecordSchema | None = None) -> ValidationVerdict:
        """
        Validate a record and raise if any field fails.

        Raises:
            RecordValidationError: If the verdict did not pass
        """
        verdict = self.validate_record(record, schema)
        if not verdict.passed:
            raise RecordValidationError(verdict)
        return verdict

    def validate_field(self, descriptor: FieldDescriptor, record: RecordView) -> FieldFailure | None:
        """
        Validate a single annotated field.

        Args:
            descriptor: The field to validate
            record: The record holding the field (for self references)

        Returns:
            FieldFailure, or None when the field passes
        """
        for validator in self._build_validators(descriptor):
            try:
                validator.validate(descriptor.value, record)
            except ValidationError as e:
                logger.debug(
                    f"{descriptor.path} failed {validator.rule_type}: {e.message}",
                    extra={"field_path": descriptor.path, "reason": e.reason},
                )
                return FieldFailure(
                    field_name=descriptor.name,
                    path=descriptor.path,
                    reason=e.reason,
                    message=e.message,
                )
        logger.debug(f"{descriptor.path} passed {descriptor.annotation}")
        return None

    def get_annotation_summary(self, record: Any, schema: RecordSchema | None = None) -> dict[str, Any]:
        """
        Summarize the intervals declared on a record.

        Returns:
            Dictionary with the record type, annotation count, annotations by
            field path and annotation counts by category
        """
        view = describe_record(record, schema)
        annotations: dict[str, str] = {}
        by_category: dict[str, int] = {}
        for descriptor in self._iter_annotated(view):
            annotations[descriptor.path] = descriptor.annotation
            category = descriptor.category.value if descriptor.category else "unsupported"
            by_category[category] = by_category.get(category, 0) + 1
        return {
            "record_type": view.record_type,
            "total_annotations": len(annotations),
            "annotations": annotations,
            "annotations_by_category": by_category,
        }

    def _build_validators(self, descriptor: FieldDescriptor) -> list[BaseValidator]:
        """Build the validator chain for one annotated field."""
        if descriptor.category is None:
            raise UnsupportedFieldType(
                f"{descriptor.type_name} fields cannot declare an interval "
                "(expected int, float, timedelta or str)",
                field_name=descriptor.name,
                annotation=descriptor.annotation,
            )

        validators: list[BaseValidator] = []
        if self.nil_policy == "fail":
            validators.append(RequiredValueValidator(descriptor.name))
        validators.append(
            IntervalValidator(
                descriptor.name,
                {"interval": descriptor.annotation, "category": descriptor.category},
            )
        )
        return validators

    def _iter_failures(self, view: RecordView, checked: list[str]) -> Iterator[FieldFailure]:
        for descriptor in view.fields:
            if descriptor.is_record:
                yield from self._iter_nested(descriptor, checked)
                continue
            if not descriptor.is_annotated:
                continue
            checked.append(descriptor.path)
            failure = self.validate_field(descriptor, view)
            if failure is not None:
                yield failure

    def _iter_nested(self, descriptor: FieldDescriptor, checked: list[str]) -> Iterator[FieldFailure]:
        if descriptor.is_annotated:
            raise UnsupportedFieldType(
                f"nested record fields ({descriptor.type_name}) cannot declare an interval",
                field_name=descriptor.name,
                annotation=descriptor.annotation,
            )
        if descriptor.value is None:
            return
        try:
            nested = describe_record(descriptor.value, descriptor.record_schema, descriptor.path)
        except UnsupportedRecordType as e:
            yield FieldFailure(
                field_name=descriptor.name,
                path=descriptor.path,
                reason=InvalidFieldValue.reason,
                message=f"validate fail: {descriptor.name} is not a record: {e}",
            )
            return
        yield from self._iter_failures(nested, checked)

    def _iter_annotated(self, view: RecordView) -> Iterator[FieldDescriptor]:
        for descriptor in view.fields:
            if descriptor.is_annotated:
                yield descriptor
            if not descriptor.is_record:
                continue
            value = descriptor.value
            if value is None and descriptor.record_schema is not None:
                # Mapping schemas are summarized without a record instance
                value = {}
            if value is None:
                continue
            yield from self._iter_annotated(
                describe_record(value, descriptor.record_schema, descriptor.path)
            )


def validate(
    record: Any,
    schema: RecordSchema | None = None,
    *,
    fail_fast: bool = False,
    nil_policy: str = "fail",
) -> ValidationVerdict:
    """Validate one record with a throwaway RecordValidator."""
    return RecordValidator(fail_fast=fail_fast, nil_policy=nil_policy).validate_record(record, schema)


def ensure_valid(
    record: Any,
    schema: RecordSchema | None = None,
    *,
    fail_fast: bool = False,
    nil_policy: str = "fail",
) -> ValidationVerdict:
    """Validate one record, raising RecordValidationError on any failure."""
    return RecordValidator(fail_fast=fail_fast, nil_policy=nil_policy).ensure_valid(record, schema)
