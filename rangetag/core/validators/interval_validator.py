"""
IntervalValidator - validates that a field value lies inside its declared interval.
"""

from typing import Any

from rangetag.core.models import (
    Bound,
    BoundaryKind,
    IntervalSpec,
    NumericCategory,
    RecordView,
    Side,
)

from .base_validator import (
    BaseValidator,
    IllegalBorder,
    InvalidAnnotationSyntax,
    MalformedLiteral,
    TooHigh,
    TooLow,
)
from .comparators import Comparator, comparator_for, number_to_str
from .grammar import UNBOUNDED, check_annotation
from .self_reference import has_self_reference, resolve_self_references
from .type_validator import TypeValidator

_BORDERS = {
    (Side.LEFT, "["): BoundaryKind.INCLUSIVE,
    (Side.LEFT, "("): BoundaryKind.EXCLUSIVE,
    (Side.RIGHT, "]"): BoundaryKind.INCLUSIVE,
    (Side.RIGHT, ")"): BoundaryKind.EXCLUSIVE,
}


def parse_partition(side: Side, partition: str, field_name: str | None = None) -> Bound:
    """
    Parse one comma-separated half of an interval.

    The boundary character is the first character of the left partition and
    the last character of the right one.

    Args:
        side: Which half the partition is
        partition: Raw partition text ("[1", " 3)")
        field_name: Field being validated (for error messages)

    Returns:
        The parsed Bound

    Raises:
        IllegalBorder: If the boundary character is not a bracket valid for the side
        MalformedLiteral: If nothing remains after the bracket
    """
    text = partition.strip()
    if not text:
        raise IllegalBorder(f"empty {side.value} partition", field_name=field_name)

    if side is Side.LEFT:
        border, literal = text[0], text[1:]
    else:
        border, literal = text[-1], text[:-1]

    kind = _BORDERS.get((side, border))
    if kind is None:
        raise IllegalBorder(
            f"illegal {side.value} border '{border}' in '{partition}'", field_name=field_name
        )

    literal = literal.strip()
    if not literal:
        raise MalformedLiteral(f"missing {side.value} bound in '{partition}'", field_name=field_name)
    if literal == UNBOUNDED:
        kind = BoundaryKind.UNBOUNDED

    return Bound(side=side, kind=kind, literal=literal)


def parse_interval(annotation: str, field_name: str | None = None) -> IntervalSpec:
    """
    Split an annotation at its comma and parse both bounds.

    >>> parse_interval("[1,3)").right.kind
    <BoundaryKind.EXCLUSIVE: 'exclusive'>
    """
    partitions = annotation.split(",")
    if len(partitions) != 2:
        raise InvalidAnnotationSyntax(
            f"interval '{annotation}' must have exactly two comma-separated bounds",
            field_name=field_name,
            annotation=annotation,
        )
    left, right = partitions
    return IntervalSpec(
        annotation=annotation,
        left=parse_partition(Side.LEFT, left, field_name),
        right=parse_partition(Side.RIGHT, right, field_name),
    )


class IntervalValidator(BaseValidator):
    """
    Validates that a field value is within an interval annotation.

    Parameters:
    - interval: The annotation, e.g. "[1,3)", "[500milli,3h]", "[self.C,self.E]"
    - category: NumericCategory of the field

    The annotation is re-parsed on every call: self references resolve against
    the record passed to validate(), which changes from call to call.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.interval = self.parameters.get("interval")
        if not self.interval:
            raise ValueError("IntervalValidator requires 'interval' parameter")

        category = self.parameters.get("category")
        if category is None:
            raise ValueError("IntervalValidator requires 'category' parameter")
        self.category = NumericCategory(category)
        self.type_validator = TypeValidator(field_name, {"category": self.category})

    def parse(self, record: RecordView) -> IntervalSpec:
        """
        Substitute self references, check the grammar and parse both bounds.

        Raises:
            ValidationError: If a self reference cannot be resolved
            AnnotationError: If the annotation is malformed
        """
        annotation = self.interval
        if has_self_reference(annotation):
            annotation = resolve_self_references(self.field_name, annotation, self.category, record)
        check_annotation(self.field_name, annotation, self.category)
        return parse_interval(annotation, self.field_name)

    def validate(self, value: Any, record: RecordView) -> None:
        """
        Validate that the value is within the interval.

        Args:
            value: The field value to validate
            record: The RecordView holding the field and its siblings

        Raises:
            TooLow: If the lower bound is not satisfied
            TooHigh: If the upper bound is not satisfied
            ValidationError: If a self reference or the value cannot be resolved
            AnnotationError: If the annotation is malformed
        """
        # Skip validation for None (handled by required_value validator)
        if value is None:
            return

        spec = self.parse(record)
        control = self.type_validator.resolve(value)
        comparator = comparator_for(self.category)

        self._check_bound(spec.left, control, comparator)
        self._check_bound(spec.right, control, comparator)

    def _check_bound(self, bound: Bound, control: Any, comparator: Comparator) -> None:
        if bound.is_unbounded:
            return
        if comparator.compare(bound.operator, control, bound.literal):
            return

        error = TooLow if bound.side is Side.LEFT else TooHigh
        raise error(
            rule_name="interval",
            field_name=self.field_name,
            message=(
                f"validate fail: {self.field_name} is {error.reason}: "
                f"{self._display(control)} {bound.operator} {bound.literal} does not hold"
            ),
        )

    def _display(self, control: Any) -> str:
        if self.category.is_duration:
            return f"{number_to_str(control)}milli"
        if self.category is NumericCategory.STRING_LENGTH:
            return f"len {control}"
        return number_to_str(control)

    @property
    def rule_type(self) -> str:
        return "interval"
