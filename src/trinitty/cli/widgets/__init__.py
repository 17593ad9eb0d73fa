"""Reusable TUI widgets."""

from trinitty.cli.widgets.base import Widget
from trinitty.cli.widgets.block import Block, Borders, BorderType, Color

__all__ = [
    "Widget",
    "Block",
    "Borders",
    "BorderType",
    "Color",
]
