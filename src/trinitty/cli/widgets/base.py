"""Widget protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from trinitty.cli.core.layout import Rect


@runtime_checkable
class Widget(Protocol):
    """Anything that can render itself into a region as a list of lines."""

    def render(self, bounds: Rect) -> list[str]:
        """Render widget content, one string per row of `bounds`."""
        ...
