"""Core TUI infrastructure - terminal session, input, event stream, layout."""

from trinitty.cli.core.terminal import TerminalSession, SessionState
from trinitty.cli.core.input import InputReader, KeyEvent, MouseEvent, Key, MouseKind
from trinitty.cli.core.events import (
    Event,
    EventChannel,
    EventProducer,
    InputEvent,
    Tick,
    TICK,
)
from trinitty.cli.core.keymap import Action, Binding, KeyMap
from trinitty.cli.core.layout import (
    Constraint,
    Direction,
    Layout,
    Length,
    Min,
    Percentage,
    Ratio,
    Rect,
)

__all__ = [
    "TerminalSession",
    "SessionState",
    "InputReader",
    "KeyEvent",
    "MouseEvent",
    "Key",
    "MouseKind",
    "Event",
    "EventChannel",
    "EventProducer",
    "InputEvent",
    "Tick",
    "TICK",
    "Action",
    "Binding",
    "KeyMap",
    "Constraint",
    "Direction",
    "Layout",
    "Length",
    "Min",
    "Percentage",
    "Ratio",
    "Rect",
]
