"""Frame descriptions - what the screen should contain on the next render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from trinitty.cli.core.layout import Constraint, Direction, Layout, Length, Rect
from trinitty.cli.widgets.base import Widget
from trinitty.cli.widgets.block import Block, Borders, BorderType, Color


@dataclass(frozen=True)
class Pane:
    """A widget and the space it asks for."""
    constraint: Constraint
    widget: Widget


@dataclass(frozen=True)
class FrameDescription:
    """Ordered panes stacked along one direction."""
    panes: Sequence[Pane]
    direction: Direction = Direction.VERTICAL

    def resolve(self, area: Rect) -> list[tuple[Rect, Widget]]:
        """Pair each widget with the region the layout assigns it."""
        layout = Layout(self.direction, [pane.constraint for pane in self.panes])
        regions = layout.split(area)
        return [(rect, pane.widget) for rect, pane in zip(regions, self.panes)]


FrameBuilder = Callable[[], FrameDescription]


def title_frame(version: str) -> FrameDescription:
    """One gray bordered row across the top, titled with the version."""
    title_bar = Block(
        title=f"[ trinitty v{version} ]",
        borders=Borders.ALL,
        border_type=BorderType.PLAIN,
        fg=Color.GRAY,
    )
    return FrameDescription(panes=(Pane(Length(1), title_bar),))
