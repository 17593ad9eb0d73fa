"""Key-binding table.

Maps key events to application actions. Only QUIT is bound today;
every other key resolves to None and is ignored by the loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from trinitty.cli.core.input import Key, KeyEvent, TerminalEvent


class Action(Enum):
    """Things a key can make the application do."""
    QUIT = auto()


@dataclass(frozen=True)
class Binding:
    """One action and the keys/chars that trigger it."""
    action: Action
    keys: tuple[str | Key, ...]
    label: str = ""

    def matches(self, event: KeyEvent) -> bool:
        for key in self.keys:
            if isinstance(key, Key):
                if event.key == key:
                    return True
            elif event.char == key:
                return True
        return False


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(Action.QUIT, ("q",), label="Quit"),
)


class KeyMap:
    """Ordered lookup from events to actions; first match wins."""

    def __init__(self, bindings: Iterable[Binding] = DEFAULT_BINDINGS) -> None:
        self._bindings = list(bindings)

    @property
    def bindings(self) -> list[Binding]:
        return list(self._bindings)

    def lookup(self, event: TerminalEvent) -> Optional[Action]:
        """Action bound to `event`, or None (mouse events are never bound)."""
        if not isinstance(event, KeyEvent):
            return None
        for binding in self._bindings:
            if binding.matches(event):
                return binding.action
        return None
