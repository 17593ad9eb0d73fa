"""Constraint-based layout for terminal regions.

A Layout splits one bounding rectangle along a single axis into one
region per constraint, placed back to back from the origin:

- Length(n):      exactly n cells
- Percentage(p):  p% of the original extent, rounded down
- Ratio(a, b):    a/b of the original extent, rounded down
- Min(n):         at least n cells

Every size is clamped to the space still left. Space left over after the
last constraint is NOT handed out to anyone; it simply stays unassigned.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union


class Direction(Enum):
    """Axis along which regions are stacked."""
    HORIZONTAL = "horizontal"  # left to right, splits width
    VERTICAL = "vertical"      # top to bottom, splits height


@dataclass(frozen=True)
class Rect:
    """Rectangle bounds (0-indexed cell coordinates)."""
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: Rect) -> bool:
        return (
            self.x < other.right and other.x < self.right
            and self.y < other.bottom and other.y < self.bottom
        )

    def inner(self, margin: int) -> Rect:
        """Shrink by `margin` cells on every side (never below zero size)."""
        width = max(0, self.width - 2 * margin)
        height = max(0, self.height - 2 * margin)
        return Rect(
            self.x + min(margin, self.width // 2),
            self.y + min(margin, self.height // 2),
            width,
            height,
        )


@dataclass(frozen=True)
class Length:
    value: int


@dataclass(frozen=True)
class Percentage:
    value: int


@dataclass(frozen=True)
class Ratio:
    numerator: int
    denominator: int


@dataclass(frozen=True)
class Min:
    value: int


Constraint = Union[Length, Percentage, Ratio, Min]


def _requested(constraint: Constraint, extent: int) -> int:
    """Cells a constraint asks for, before clamping to what is left."""
    if isinstance(constraint, (Length, Min)):
        return max(0, constraint.value)
    if isinstance(constraint, Percentage):
        return max(0, constraint.value * extent // 100)
    if isinstance(constraint, Ratio):
        if constraint.denominator <= 0:
            return 0
        return max(0, constraint.numerator * extent // constraint.denominator)
    raise TypeError(f"Unknown constraint: {constraint!r}")


@dataclass(frozen=True)
class Layout:
    """
    Ordered constraints applied along one direction.

    Example:
        Layout(Direction.VERTICAL, [Length(1)]).split(Rect(0, 0, 80, 10))
        -> [Rect(x=0, y=0, width=80, height=1)]
    """
    direction: Direction
    constraints: Sequence[Constraint]
    margin: int = 0

    def split(self, area: Rect) -> list[Rect]:
        """Resolve constraints against `area`, one Rect per constraint."""
        bounds = area.inner(self.margin) if self.margin else area
        vertical = self.direction == Direction.VERTICAL
        extent = bounds.height if vertical else bounds.width

        regions: list[Rect] = []
        offset = 0
        for constraint in self.constraints:
            size = min(_requested(constraint, extent), extent - offset)
            if vertical:
                regions.append(Rect(bounds.x, bounds.y + offset, bounds.width, size))
            else:
                regions.append(Rect(bounds.x + offset, bounds.y, size, bounds.height))
            offset += size
        return regions
