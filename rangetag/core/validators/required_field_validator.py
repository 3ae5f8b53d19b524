"""
RequiredValueValidator - an annotated optional field must hold a value.
"""

from typing import Any

from .base_validator import BaseValidator, NilField


class RequiredValueValidator(BaseValidator):
    """
    Validates that an annotated field is not None.

    Only installed when the nil policy is "fail"; with the "skip" policy an
    unset optional field makes its interval inapplicable instead.
    """

    def validate(self, value: Any, record: Any) -> None:
        """
        Validate that the field holds a value.

        Args:
            value: The field value to validate
            record: The RecordView (unused)

        Raises:
            NilField: If value is None
        """
        if value is None:
            raise NilField(
                rule_name="required_value",
                field_name=self.field_name,
                message=f"validate fail: {self.field_name} is nil but declares an interval",
            )

    @property
    def rule_type(self) -> str:
        return "required_value"
