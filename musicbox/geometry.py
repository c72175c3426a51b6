"""Page-space geometry for tape strips.

All coordinates are millimetres with the origin at the top-left corner of
the page and y increasing downward.
"""

from __future__ import annotations

from enum import Enum
from typing import List, NamedTuple


class Point(NamedTuple):
    x: float
    y: float


class JoinStyle(str, Enum):
    """Shape of the edge where two adjacent strips meet."""

    ZIGZAG = "zigzag"
    DIAGONAL = "diagonal"
    STRAIGHT = "straight"

    @classmethod
    def parse(cls, value: "JoinStyle | str") -> "JoinStyle":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(style.value for style in cls)
            raise ValueError(f"join_style must be one of: {valid}") from None

    def effective_width(self, join_width: float) -> float:
        """Width consumed by the join when packing strips."""

        return 0.0 if self is JoinStyle.STRAIGHT else join_width

    def edge(
        self,
        x: float,
        y: float,
        *,
        tape_height: float,
        join_width: float,
        num_zig_zags: int,
    ) -> List[Point]:
        """Return the connecting edge anchored at `(x, y)`, traced top to bottom."""

        if self is JoinStyle.ZIGZAG:
            return zig_zag_edge(x, y, tape_height, join_width, num_zig_zags)
        if self is JoinStyle.DIAGONAL:
            return [Point(x, y), Point(x + join_width, y + tape_height)]
        return [Point(x, y), Point(x, y + tape_height)]


def zig_zag_edge(
    x: float, y: float, tape_height: float, join_width: float, num_zig_zags: int
) -> List[Point]:
    tooth_height = tape_height / num_zig_zags
    points: List[Point] = []
    for i in range(num_zig_zags):
        top = y + i * tooth_height
        middle = y + (i * 2 + 1) * tooth_height / 2.0
        points.append(Point(x, top))
        points.append(Point(x + join_width, middle))
    points.append(Point(x, y + tape_height))
    return points
