"""Terminal session - owns the terminal while the application runs.

The session has two states. RELEASED is the user's normal terminal.
MANAGED means raw input, alternate screen, mouse reporting and a hidden
cursor. acquire() moves to MANAGED and unwinds any partial step if a
later one fails; release() undoes everything exactly once. Using the
session as a context manager makes release run on every exit path.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from enum import Enum
from typing import Callable, Optional, Sequence, TextIO

from trinitty.cli.core.ansi_text import fit_to_width
from trinitty.cli.core.layout import Rect
from trinitty.errors import TerminalError, TerminalStateError

logger = logging.getLogger(__name__)

ENTER_ALT_SCREEN = '\x1b[?1049h'
LEAVE_ALT_SCREEN = '\x1b[?1049l'
ENABLE_MOUSE = '\x1b[?1000h\x1b[?1002h\x1b[?1006h'
DISABLE_MOUSE = '\x1b[?1006l\x1b[?1002l\x1b[?1000l'
HIDE_CURSOR = '\x1b[?25l'
SHOW_CURSOR = '\x1b[?25h'
RESET = '\x1b[0m'
CLEAR = '\x1b[2J\x1b[H'

FALLBACK_SIZE = (80, 24)


class SessionState(Enum):
    RELEASED = "released"
    MANAGED = "managed"


class TerminalSession:
    """
    Exclusive owner of the terminal device.

    Usage:
        with TerminalSession() as session:
            session.draw(Rect(0, 0, 80, 1), ["hello"])
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        input_fd: Optional[int] = None,
        mouse: bool = True,
    ) -> None:
        self.output = sys.stdout if output is None else output
        self._input_fd = input_fd
        self.mouse = mouse
        self.state = SessionState.RELEASED
        self._saved_tty: Optional[list] = None
        self._undo: list[tuple[str, Callable[[], None]]] = []

    @property
    def input_fd(self) -> int:
        return sys.stdin.fileno() if self._input_fd is None else self._input_fd

    @property
    def managed(self) -> bool:
        return self.state is SessionState.MANAGED

    # -- lifecycle -------------------------------------------------------

    def acquire(self) -> TerminalSession:
        """Enter managed mode. Raises TerminalError with nothing left changed on failure."""
        if self.managed:
            raise TerminalStateError("terminal session already acquired")

        steps: list[tuple[str, Callable[[], None], Callable[[], None]]] = [
            ("raw mode", self._enter_raw_mode, self._leave_raw_mode),
            ("alternate screen", self._enter_alt_screen, self._leave_alt_screen),
        ]
        if self.mouse:
            steps.append(("mouse capture", self._enable_mouse, self._disable_mouse))
        steps.append(("cursor", self._hide_cursor, self._show_cursor))

        try:
            for name, enter, leave in steps:
                enter()
                self._undo.append((name, leave))
        except Exception as e:
            logger.error("terminal setup failed: %s", e)
            self._unwind()
            raise TerminalError(f"cannot enter managed terminal mode: {e}") from e

        self.state = SessionState.MANAGED
        atexit.register(self.release)
        logger.info("terminal session acquired")
        return self

    def release(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        if not self.managed:
            return
        self.state = SessionState.RELEASED
        atexit.unregister(self.release)
        self._unwind()
        logger.info("terminal session released")

    def _unwind(self) -> None:
        # Every undo step runs even if an earlier one fails
        errors: list[BaseException] = []
        while self._undo:
            name, leave = self._undo.pop()
            try:
                leave()
            except Exception as e:
                logger.error("failed to restore %s: %s", name, e)
                errors.append(e)
        if errors:
            raise TerminalError(f"terminal not fully restored: {errors[0]}") from errors[0]

    def __enter__(self) -> TerminalSession:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.release()
            return
        # Already unwinding: a restore failure must not replace the original error
        try:
            self.release()
        except TerminalError as e:
            logger.error("terminal restore failed while handling %s: %s", exc_type.__name__, e)

    # -- mode switches ---------------------------------------------------

    def _enter_raw_mode(self) -> None:
        import termios
        import tty
        fd = self.input_fd
        self._saved_tty = termios.tcgetattr(fd)
        tty.setraw(fd)

    def _leave_raw_mode(self) -> None:
        import termios
        if self._saved_tty is not None:
            termios.tcsetattr(self.input_fd, termios.TCSADRAIN, self._saved_tty)
            self._saved_tty = None

    def _enter_alt_screen(self) -> None:
        self._emit(ENTER_ALT_SCREEN + CLEAR)

    def _leave_alt_screen(self) -> None:
        self._emit(RESET + LEAVE_ALT_SCREEN)

    def _enable_mouse(self) -> None:
        self._emit(ENABLE_MOUSE)

    def _disable_mouse(self) -> None:
        self._emit(DISABLE_MOUSE)

    def _hide_cursor(self) -> None:
        self._emit(HIDE_CURSOR)

    def _show_cursor(self) -> None:
        self._emit(SHOW_CURSOR)

    def _emit(self, seq: str) -> None:
        self.output.write(seq)
        self.output.flush()

    # -- drawing ---------------------------------------------------------

    def area(self) -> Rect:
        """Current drawable area (whole terminal)."""
        try:
            size = os.get_terminal_size(self.output.fileno())
            cols, rows = size.columns, size.lines
        except (AttributeError, ValueError, OSError):
            cols, rows = FALLBACK_SIZE
        return Rect(0, 0, cols, rows)

    def draw(self, rect: Rect, lines: Sequence[str]) -> None:
        """Write `lines` into `rect`, clipping and padding to its width."""
        if not self.managed:
            raise TerminalStateError("cannot draw while the terminal session is released")

        parts: list[str] = []
        for offset in range(rect.height):
            line = lines[offset] if offset < len(lines) else ""
            parts.append(f'\x1b[{rect.y + offset + 1};{rect.x + 1}H')
            parts.append(fit_to_width(line, rect.width))
        parts.append(RESET)
        self._emit(''.join(parts))
