"""
Unit tests for the record validator.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field

from rangetag.core.models import RecordSchema
from rangetag.core.rules import RecordValidationError, RecordValidator, ensure_valid, validate
from rangetag.core.schema import Interval, UInt, UnsupportedRecordType, describe_record
from rangetag.core.validators import (
    IllegalBorder,
    InvalidAnnotationSyntax,
    UnsupportedFieldType,
)
from rangetag.observability.metrics import generate_metrics
from rangetag.settings import ValidatorSettings


@dataclass
class Param:
    A: Annotated[int, Interval("[1,3)")]
    B: Annotated[float, Interval("[~,3.3)")]
    C: Annotated[UInt, Interval("[2,45435]")]
    D: Annotated[timedelta, Interval("[500milli,3h]")]
    E: UInt
    F: Annotated[UInt, Interval("[self.C,self.E]")]


def make_param(**overrides) -> Param:
    values = dict(A=2, B=1.5, C=2, D=timedelta(hours=1), E=45435, F=100)
    values.update(overrides)
    return Param(**values)


@dataclass
class Named:
    name: Annotated[str, Interval("[1,~]")]


@dataclass
class Limits:
    retries: Annotated[int, Interval("[0,5]")]
    burst: Annotated[int, Interval("[1,10]")] = 1


@dataclass
class Job:
    limits: Limits
    fallback: Optional[Limits] = None
    priority: Annotated[int, Interval("[0,9]")] = 0


@dataclass
class MaybeCount:
    count: Annotated[Optional[int], Interval("[1,3]")] = None


@dataclass
class BadDuration:
    wait: Annotated[timedelta, Interval("[1,4day]")]


@dataclass
class BadBorder:
    value: Annotated[int, Interval("[1,3}")]


@dataclass
class TaggedList:
    items: Annotated[list, Interval("[1,3]")]


@dataclass
class TaggedBool:
    enabled: Annotated[bool, Interval("[0,1]")]


@dataclass
class TaggedNested:
    limits: Annotated[Limits, Interval("[0,1]")]


class Service(BaseModel):
    port: Annotated[int, Interval("[1024,65535]")]
    timeout: timedelta = Field(default=timedelta(seconds=30), json_schema_extra={"valid": "(0milli,1m]"})


@pytest.fixture
def validator():
    return RecordValidator()


class TestScenarios:
    """End-to-end interval scenarios"""

    def test_half_open_interval(self, validator):
        assert validator.validate_record(make_param(A=2)).passed

        too_high = validator.validate_record(make_param(A=3))
        assert not too_high.passed
        assert too_high.failures[0].field_name == "A"
        assert too_high.failures[0].reason == "too high"

        too_low = validator.validate_record(make_param(A=0))
        assert too_low.failures[0].reason == "too low"

    def test_self_reference_bounds(self, validator):
        assert validator.validate_record(make_param(C=2, E=45435, F=100)).passed

    def test_self_reference_out_of_bounds(self, validator):
        verdict = validator.validate_record(make_param(C=200, F=100))

        assert verdict.failed_fields == ["F"]
        assert verdict.failures[0].reason == "too low"

    def test_duration_inclusive_upper(self, validator):
        assert validator.validate_record(make_param(D=timedelta(hours=3))).passed

        verdict = validator.validate_record(make_param(D=timedelta(hours=3, milliseconds=1)))
        assert verdict.failed_fields == ["D"]
        assert verdict.failures[0].reason == "too high"

    def test_string_length(self, validator):
        assert validator.validate_record(Named(name="abc")).passed
        assert validator.validate_record(Named(name="")).failures[0].reason == "too low"

    def test_broken_duration_annotation(self, validator):
        with pytest.raises(InvalidAnnotationSyntax) as exc_info:
            validator.validate_record(BadDuration(wait=timedelta(hours=1)))

        assert exc_info.value.field_name == "wait"

    def test_nested_failure_uses_nested_name(self, validator):
        verdict = validator.validate_record(Job(limits=Limits(retries=9)))

        assert not verdict.passed
        assert verdict.failures[0].field_name == "retries"
        assert verdict.failures[0].path == "limits.retries"

    def test_uint_max(self, validator):
        @dataclass
        class Big:
            value: Annotated[UInt, Interval("[0,18446744073709551615]")]

        assert validator.validate_record(Big(value=2**64 - 1)).passed


class TestAggregation:
    """Aggregate vs fail-fast reporting"""

    def test_all_failures_collected_in_field_order(self, validator):
        verdict = validator.validate_record(make_param(A=5, B=9.9, C=1, F=0))

        assert verdict.failed_fields == ["A", "B", "C", "F"]
        assert [f.reason for f in verdict.failures] == ["too high", "too high", "too low", "too low"]

    def test_fail_fast_stops_at_first(self):
        verdict = RecordValidator(fail_fast=True).validate_record(make_param(A=5, B=9.9))

        assert verdict.failed_fields == ["A"]

    def test_checked_fields(self, validator):
        verdict = validator.validate_record(make_param())

        assert verdict.checked_fields == ["A", "B", "C", "D", "F"]

    def test_nested_checked_fields(self, validator):
        verdict = validator.validate_record(Job(limits=Limits(retries=1), fallback=Limits(retries=2)))

        assert verdict.checked_fields == [
            "limits.retries", "limits.burst", "fallback.retries", "fallback.burst", "priority",
        ]

    def test_unset_optional_record_is_skipped(self, validator):
        verdict = validator.validate_record(Job(limits=Limits(retries=1)))

        assert verdict.passed
        assert "fallback.retries" not in verdict.checked_fields

    def test_error_message_joins_failures(self, validator):
        verdict = validator.validate_record(make_param(A=3, B=4.0))

        assert verdict.error_message() == (
            "validate fail: A is too high: 3 < 3 does not hold; "
            "validate fail: B is too high: 4.0 < 3.3 does not hold"
        )


class TestNilPolicy:
    """Annotated fields holding None"""

    def test_fail_policy_reports_nil_field(self, validator):
        verdict = validator.validate_record(MaybeCount())

        assert verdict.failures[0].reason == "nil field"

    def test_skip_policy_ignores_nil_field(self):
        assert RecordValidator(nil_policy="skip").validate_record(MaybeCount()).passed

    def test_present_value_still_checked(self):
        verdict = RecordValidator(nil_policy="skip").validate_record(MaybeCount(count=7))

        assert verdict.failures[0].reason == "too high"

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            RecordValidator(nil_policy="ignore")

    def test_from_settings(self):
        validator = RecordValidator.from_settings(ValidatorSettings(fail_fast=True, nil_policy="skip"))

        assert validator.fail_fast is True
        assert validator.nil_policy == "skip"


class TestSelfReferenceFailures:
    """Self reference failures are collected, not raised"""

    def test_missing_sibling(self, validator):
        @dataclass
        class Dangling:
            value: Annotated[int, Interval("[self.nope,3]")]

        verdict = validator.validate_record(Dangling(value=1))

        assert verdict.failures[0].reason == "self field not found"

    def test_type_mismatch(self, validator):
        @dataclass
        class Mixed:
            ratio: float
            value: Annotated[int, Interval("[self.ratio,3]")]

        verdict = validator.validate_record(Mixed(ratio=0.5, value=1))

        assert verdict.failures[0].reason == "self field type mismatch"

    @pytest.mark.parametrize("limit", [math.inf, math.nan])
    def test_non_finite_sibling(self, validator, limit):
        @dataclass
        class Ratio:
            limit: float
            value: Annotated[float, Interval("[~,self.limit]")]

        verdict = validator.validate_record(Ratio(limit=limit, value=1.0))

        assert verdict.failed_fields == ["value"]
        assert verdict.failures[0].reason == "invalid value"

    def test_negative_sibling_bounding_duration(self, validator):
        @dataclass
        class Backoff:
            floor: int
            wait: Annotated[timedelta, Interval("[self.floor,1h]")]

        verdict = validator.validate_record(Backoff(floor=-5, wait=timedelta(seconds=1)))

        assert verdict.failed_fields == ["wait"]
        assert verdict.failures[0].reason == "invalid value"

    def test_large_negative_integer_is_exact(self, validator):
        @dataclass
        class Wide:
            value: Annotated[int, Interval("[-9007199254740992,~]")]

        verdict = validator.validate_record(Wide(value=-9007199254740993))

        assert verdict.failures[0].reason == "too low"


class TestFatalErrors:
    """Broken declarations raise instead of being collected"""

    def test_illegal_border(self, validator):
        with pytest.raises((IllegalBorder, InvalidAnnotationSyntax)):
            validator.validate_record(BadBorder(value=2))

    @pytest.mark.parametrize("record", [
        TaggedList(items=[1]),
        TaggedBool(enabled=True),
        TaggedNested(limits=Limits(retries=1)),
    ])
    def test_unsupported_field_types(self, validator, record):
        with pytest.raises(UnsupportedFieldType):
            validator.validate_record(record)

    def test_fatal_error_raised_after_collected_failures(self):
        @dataclass
        class Mixed:
            low: Annotated[int, Interval("[1,3]")]
            broken: Annotated[int, Interval("[1,3")]

        with pytest.raises(InvalidAnnotationSyntax):
            RecordValidator().validate_record(Mixed(low=0, broken=2))

    def test_non_record(self, validator):
        with pytest.raises(UnsupportedRecordType):
            validator.validate_record(42)


class TestPydanticRecords:
    def test_model_passes(self, validator):
        verdict = validator.validate_record(Service(port=8080))

        assert verdict.passed
        assert verdict.record_type == "Service"

    def test_model_fails(self, validator):
        verdict = validator.validate_record(Service(port=80, timeout=timedelta(0)))

        assert verdict.failed_fields == ["port", "timeout"]


class TestMappingRecords:
    def test_valid_mapping(self, validator, param_schema, valid_param):
        assert validator.validate_record(valid_param, param_schema).passed

    def test_missing_key_is_nil(self, validator, param_schema, valid_param):
        del valid_param["A"]
        verdict = validator.validate_record(valid_param, param_schema)

        assert verdict.failures[0].field_name == "A"
        assert verdict.failures[0].reason == "nil field"

    def test_unreadable_value(self, validator, param_schema, valid_param):
        valid_param["C"] = "many"
        verdict = validator.validate_record(valid_param, param_schema)

        assert "invalid value" in [f.reason for f in verdict.failures]

    def test_duration_literal_value(self, validator, param_schema, valid_param):
        valid_param["D"] = "3h"

        assert validator.validate_record(valid_param, param_schema).passed

    def test_batch(self, validator, param_schema, valid_param):
        verdicts = validator.validate_batch([valid_param, {**valid_param, "A": 7}], param_schema)

        assert [v.passed for v in verdicts] == [True, False]


class TestConvenienceFunctions:
    def test_validate(self):
        assert validate(make_param()).passed
        assert validate(make_param(A=3, B=9.0), fail_fast=True).failed_fields == ["A"]

    def test_ensure_valid_passes(self):
        assert ensure_valid(make_param()).passed

    def test_ensure_valid_raises(self):
        with pytest.raises(RecordValidationError) as exc_info:
            ensure_valid(make_param(A=3))

        assert exc_info.value.verdict.failed_fields == ["A"]
        assert "A is too high" in str(exc_info.value)

    def test_validate_field(self, validator, param_schema, valid_param):
        view = describe_record(valid_param, param_schema)
        assert validator.validate_field(view.sibling("A"), view) is None

        failure = validator.validate_field(view.sibling("F").model_copy(update={"value": 1}), view)
        assert failure.reason == "too low"


class TestAnnotationSummary:
    def test_summary(self, validator):
        summary = validator.get_annotation_summary(make_param())

        assert summary["record_type"] == "Param"
        assert summary["total_annotations"] == 5
        assert summary["annotations"]["F"] == "[self.C,self.E]"
        assert summary["annotations_by_category"] == {"int": 1, "float": 1, "uint": 2, "duration": 1}

    def test_summary_of_mapping_schema(self, validator):
        schema = RecordSchema.model_validate({
            "name": "Job",
            "fields": {"limits": {"type": "record", "fields": {"retries": {"type": "int", "valid": "[0,5]"}}}},
        })

        assert validator.get_annotation_summary({}, schema)["annotations"] == {"limits.retries": "[0,5]"}


class TestMetrics:
    def test_verdicts_are_counted(self, validator):
        validator.validate_record(make_param(A=3))
        text = generate_metrics().decode()

        assert "rangetag_records_validated_total" in text
        assert 'rangetag_field_failures_total{field_name="A",reason="too high",record_type="Param"}' in text

    def test_annotation_errors_are_counted(self, validator):
        with pytest.raises(InvalidAnnotationSyntax):
            validator.validate_record(BadDuration(wait=timedelta(hours=1)))
        text = generate_metrics().decode()

        assert 'rangetag_annotation_errors_total{error_type="InvalidAnnotationSyntax"}' in text
        assert 'rangetag_records_validated_total{record_type="BadDuration",status="error"}' in text
        assert 'rangetag_validation_duration_seconds_count{record_type="BadDuration"}' in text
