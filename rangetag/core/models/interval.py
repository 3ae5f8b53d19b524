"""
Interval models: the parsed form of an interval annotation (ephemeral).
"""

from enum import Enum

from pydantic import BaseModel, Field


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class BoundaryKind(str, Enum):
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"
    UNBOUNDED = "unbounded"


class Bound(BaseModel):
    """
    One side of an interval.

    Attributes:
        side: LEFT (lower bound) or RIGHT (upper bound)
        kind: INCLUSIVE, EXCLUSIVE or UNBOUNDED ("~")
        literal: Raw bound token with the bracket and whitespace stripped
    """

    side: Side
    kind: BoundaryKind
    literal: str = Field(..., min_length=1)

    @property
    def is_unbounded(self) -> bool:
        return self.kind is BoundaryKind.UNBOUNDED

    @property
    def operator(self) -> str:
        """Comparison the field value must satisfy against this bound."""
        if self.side is Side.LEFT:
            return ">=" if self.kind is BoundaryKind.INCLUSIVE else ">"
        return "<=" if self.kind is BoundaryKind.INCLUSIVE else "<"

    class Config:
        frozen = True


class IntervalSpec(BaseModel):
    """
    A parsed interval annotation: always exactly one left and one right bound.

    Attributes:
        annotation: The annotation the bounds were parsed from (after self-reference substitution)
        left: Lower bound
        right: Upper bound
    """

    annotation: str
    left: Bound
    right: Bound

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "annotation": "[1,3)",
                "left": {"side": "left", "kind": "inclusive", "literal": "1"},
                "right": {"side": "right", "kind": "exclusive", "literal": "3"},
            }
        }
