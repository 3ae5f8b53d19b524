"""
Base validator interface and the error taxonomy shared by all validators.

Two error channels exist:

- AnnotationError: the interval declaration itself is broken (bad syntax,
  illegal border, unsupported field type). Always propagates to the caller.
- ValidationError: the data does not satisfy a well-formed declaration
  (too low, too high, unresolvable self reference, nil field). Raised by
  validators and collected by the record validator.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any


class AnnotationError(Exception):
    """Raised when an interval annotation or its field declaration is corrupt."""

    def __init__(self, message: str, field_name: str | None = None, annotation: str | None = None):
        self.field_name = field_name
        self.annotation = annotation
        self.message = message
        prefix = f"{field_name}: " if field_name else ""
        super().__init__(f"{prefix}{message}")


class InvalidAnnotationSyntax(AnnotationError):
    """Annotation does not match the numeric or duration interval grammar."""


class MalformedLiteral(AnnotationError):
    """Bound literal has no leading digit run."""


class IllegalBorder(AnnotationError):
    """Partition starts or ends with something other than a matching bracket."""


class UnsupportedFieldType(AnnotationError):
    """Annotated field is not an integer, float, timedelta or str."""


class ValidationError(Exception):
    """Raised when a field value fails a validation rule."""

    reason = "invalid"

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class TooLow(ValidationError):
    reason = "too low"


class TooHigh(ValidationError):
    reason = "too high"


class SelfFieldNotFound(ValidationError):
    reason = "self field not found"


class SelfFieldNotNumeric(ValidationError):
    reason = "self field not numeric"


class SelfFieldTypeMismatch(ValidationError):
    reason = "self field type mismatch"


class NilField(ValidationError):
    reason = "nil field"


class InvalidFieldValue(ValidationError):
    """Runtime value cannot be read as the field's declared numeric category."""

    reason = "invalid value"


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements a specific check applied to one field
    (required_value, type_check, interval).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters (e.g., interval and category)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: Any) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The RecordView the field belongs to (for self references)

        Raises:
            ValidationError: If validation fails
            AnnotationError: If the rule's declaration is broken
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
