"""Bordered block widget with an optional title."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from typing import Optional

from trinitty.cli.core.layout import Rect


class Borders(Flag):
    NONE = 0
    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8
    ALL = TOP | BOTTOM | LEFT | RIGHT


class BorderType(Enum):
    """Box-drawing character sets: (horizontal, vertical, tl, tr, bl, br)."""
    PLAIN = ("─", "│", "┌", "┐", "└", "┘")
    ROUNDED = ("─", "│", "╭", "╮", "╰", "╯")
    DOUBLE = ("═", "║", "╔", "╗", "╚", "╝")
    THICK = ("━", "┃", "┏", "┓", "┗", "┛")


class Color(Enum):
    """Foreground colors as SGR parameters."""
    DEFAULT = "39"
    BLACK = "30"
    RED = "31"
    GREEN = "32"
    YELLOW = "33"
    BLUE = "34"
    MAGENTA = "35"
    CYAN = "36"
    GRAY = "37"
    DARK_GRAY = "90"
    WHITE = "97"


@dataclass
class Block:
    """
    A box drawn around a region, title on the top edge.

    When the region is a single row the top edge is all that fits,
    so the result is one line of border with the title laid over it.
    """
    title: Optional[str] = None
    borders: Borders = Borders.ALL
    border_type: BorderType = BorderType.PLAIN
    fg: Color = Color.DEFAULT

    def render(self, bounds: Rect) -> list[str]:
        width, height = bounds.width, bounds.height
        if width <= 0 or height <= 0:
            return []

        h, v, tl, tr, bl, br = self.border_type.value
        left = Borders.LEFT in self.borders
        right = Borders.RIGHT in self.borders

        rows: list[list[str]] = [[" "] * width for _ in range(height)]
        for row in rows:
            if left:
                row[0] = v
            if right:
                row[-1] = v
        if Borders.BOTTOM in self.borders:
            rows[-1] = self._edge(width, h, bl if left else h, br if right else h)
        if Borders.TOP in self.borders:
            rows[0] = self._edge(width, h, tl if left else h, tr if right else h)

        if self.title:
            start = 1 if left else 0
            end = width - 1 if right else width
            for i, ch in enumerate(self.title[:max(0, end - start)]):
                rows[0][start + i] = ch

        sgr = f"\x1b[{self.fg.value}m"
        return [f"{sgr}{''.join(row)}\x1b[0m" for row in rows]

    @staticmethod
    def _edge(width: int, fill: str, first: str, last: str) -> list[str]:
        edge = [fill] * width
        edge[0] = first
        edge[-1] = last
        return edge
