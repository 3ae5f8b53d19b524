"""
Annotation markers for declaring intervals on dataclass and pydantic fields.

    @dataclass
    class Param:
        A: Annotated[int, Interval("[1,3)")]
        C: Annotated[UInt, Interval("[2,45435]")]
        D: Annotated[timedelta, Interval("[500milli,3h]")]
        F: Annotated[UInt, Interval("[self.C,self.E]")]

Dataclass fields may also use field(metadata={"valid": "..."}) and pydantic
fields Field(json_schema_extra={"valid": "..."}).
"""

from typing import Annotated

ANNOTATION_KEY = "valid"


class Interval:
    """Interval annotation attached through typing.Annotated."""

    __slots__ = ("annotation",)

    def __init__(self, annotation: str):
        if not isinstance(annotation, str) or not annotation:
            raise ValueError("Interval annotation must be a non-empty string")
        self.annotation = annotation

    def __eq__(self, other):
        return isinstance(other, Interval) and other.annotation == self.annotation

    def __hash__(self):
        return hash((Interval, self.annotation))

    def __repr__(self) -> str:
        return f"Interval({self.annotation!r})"


class Unsigned:
    """Marks an int field as unsigned 64-bit."""

    __slots__ = ()

    def __eq__(self, other):
        return isinstance(other, Unsigned)

    def __hash__(self):
        return hash(Unsigned)

    def __repr__(self) -> str:
        return "Unsigned()"


UInt = Annotated[int, Unsigned()]
