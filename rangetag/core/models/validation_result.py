"""
ValidationVerdict model representing the outcome of validating a record (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator


class FieldFailure(BaseModel):
    """
    One field that did not satisfy its interval.

    Attributes:
        field_name: Name of the offending field (the nested field's own name for nested records)
        path: Dotted path from the validated record to the field ("inner.count")
        reason: "too low", "too high", "nil field", "self field not found", ...
        message: Human-readable description
    """

    field_name: str
    path: str
    reason: str
    message: str

    class Config:
        frozen = True


class ValidationVerdict(BaseModel):
    """
    Outcome of validating a record (ephemeral, never persisted).

    Attributes:
        record_type: Name of the validated record type
        passed: Overall validation status
        failures: Every failed field, in field order (a single entry in fail-fast mode)
        checked_fields: Paths of annotated fields that were evaluated
    """

    record_type: str
    passed: bool
    failures: list[FieldFailure] = Field(default_factory=list)
    checked_fields: list[str] = Field(default_factory=list)

    @field_validator("failures")
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies failures is empty."""
        if info.data.get("passed") and len(v) > 0:
            raise ValueError("passed=True but failures is not empty")
        return v

    @property
    def failed_fields(self) -> list[str]:
        return [failure.field_name for failure in self.failures]

    def error_message(self) -> str:
        """All failure messages joined into one line."""
        return "; ".join(failure.message for failure in self.failures)

    class Config:
        json_schema_extra = {
            "example": {
                "record_type": "Param",
                "passed": False,
                "failures": [
                    {
                        "field_name": "A",
                        "path": "A",
                        "reason": "too high",
                        "message": "validate fail: A is too high: 3 < 3 does not hold",
                    }
                ],
                "checked_fields": ["A", "B", "C", "D", "F"],
            }
        }
