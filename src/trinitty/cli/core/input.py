"""Keyboard and mouse input decoding from the raw terminal stream."""

from __future__ import annotations

import codecs
import os
import select
import sys
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from trinitty.errors import InputStreamError


class Key(Enum):
    """Named key constants."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    TAB = auto()
    BACKSPACE = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    DELETE = auto()
    INSERT = auto()
    F1 = auto()
    F2 = auto()
    F3 = auto()
    F4 = auto()


class MouseKind(Enum):
    """What the mouse did."""
    PRESS = auto()
    RELEASE = auto()
    DRAG = auto()
    MOVE = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A single key press."""
    key: Optional[Key] = None   # Named key if recognized
    char: Optional[str] = None  # Character if printable
    raw: str = ""

    @property
    def is_char(self) -> bool:
        return self.char is not None and self.key is None


@dataclass(frozen=True)
class MouseEvent:
    """A mouse report (SGR 1006 encoding), 0-indexed cell coordinates."""
    kind: MouseKind
    button: int
    col: int
    row: int
    raw: str = ""


TerminalEvent = Union[KeyEvent, MouseEvent]


def _decode_sgr_mouse(seq: str) -> Optional[MouseEvent]:
    """Decode '[<b;x;yM' / '[<b;x;ym' (without the ESC prefix)."""
    try:
        code, col, row = (int(part) for part in seq[2:-1].split(';'))
    except ValueError:
        return None

    if code & 64:
        kind = MouseKind.SCROLL_DOWN if code & 1 else MouseKind.SCROLL_UP
    elif seq.endswith('m'):
        kind = MouseKind.RELEASE
    elif code & 32:
        kind = MouseKind.MOVE if code & 3 == 3 else MouseKind.DRAG
    else:
        kind = MouseKind.PRESS

    return MouseEvent(kind=kind, button=code & 3, col=col - 1, row=row - 1, raw='\x1b' + seq)


class InputReader:
    """
    Polling reader for the terminal input fd.

    Uses select() with a bounded timeout and os.read() so Python's own
    buffering never hides bytes from the poll. Unlike a best-effort
    reader, OS failures are not swallowed: a broken or closed input
    stream raises InputStreamError.
    """

    # Escape sequence mappings (without the \x1b prefix)
    SEQUENCES: dict[str, Key] = {
        '[A': Key.UP,
        '[B': Key.DOWN,
        '[C': Key.RIGHT,
        '[D': Key.LEFT,
        'OA': Key.UP,
        'OB': Key.DOWN,
        'OC': Key.RIGHT,
        'OD': Key.LEFT,
        '[H': Key.HOME,
        '[F': Key.END,
        '[1~': Key.HOME,
        '[4~': Key.END,
        '[5~': Key.PAGE_UP,
        '[6~': Key.PAGE_DOWN,
        '[2~': Key.INSERT,
        '[3~': Key.DELETE,
        'OP': Key.F1,
        'OQ': Key.F2,
        'OR': Key.F3,
        'OS': Key.F4,
    }

    SIMPLE_KEYS: dict[str, Key] = {
        '\r': Key.ENTER,
        '\n': Key.ENTER,
        '\t': Key.TAB,
        '\x7f': Key.BACKSPACE,
        '\x08': Key.BACKSPACE,
    }

    ESCAPE_TIMEOUT = 0.05  # wait for the tail of a split escape sequence

    def __init__(self, fd: Optional[int] = None) -> None:
        self._buffer = ""
        self._fd = sys.stdin.fileno() if fd is None else fd
        # Keeps a multi-byte character split across reads intact
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

    @property
    def fd(self) -> int:
        return self._fd

    def read(self, timeout: float) -> Optional[TerminalEvent]:
        """
        Wait up to `timeout` seconds for one event.

        Returns None if nothing decodable arrived in time.
        """
        if self._buffer:
            return self._process_buffer()

        if not self._has_input(timeout):
            return None

        self._read_available()
        if self._buffer == '\x1b':
            self._wait_for_escape_sequence()

        if self._buffer:
            return self._process_buffer()
        return None

    def _read_available(self) -> None:
        try:
            data = os.read(self._fd, 1024)
        except BlockingIOError:
            return
        except OSError as e:
            raise InputStreamError(f"cannot read terminal input: {e}") from e
        if not data:
            raise InputStreamError("terminal input stream closed")
        self._buffer += self._decoder.decode(data)

    def _wait_for_escape_sequence(self) -> None:
        deadline = time.monotonic() + self.ESCAPE_TIMEOUT
        while (remaining := deadline - time.monotonic()) > 0:
            if not self._has_input(remaining):
                return
            self._read_available()
            tail = self._buffer[-1]
            if len(self._buffer) > 2 and (tail.isalpha() or tail == '~'):
                return
            if self._buffer[1:] in self.SEQUENCES:
                return

    def _has_input(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self._fd], [], [], max(0.0, timeout))
        except (ValueError, OSError) as e:
            raise InputStreamError(f"cannot poll terminal input: {e}") from e
        return bool(ready)

    def _process_buffer(self) -> Optional[TerminalEvent]:
        if not self._buffer:
            return None
        head = self._buffer[0]

        if head in self.SIMPLE_KEYS:
            self._buffer = self._buffer[1:]
            return KeyEvent(key=self.SIMPLE_KEYS[head], raw=head)

        if head == '\x1b':
            return self._parse_escape_sequence()

        self._buffer = self._buffer[1:]
        if head.isprintable():
            return KeyEvent(char=head, raw=head)

        # Unhandled control character
        return None

    def _parse_escape_sequence(self) -> TerminalEvent:
        rest = self._buffer[1:]
        if not rest or rest[0] == '\x1b':
            self._buffer = rest
            return KeyEvent(key=Key.ESCAPE, raw='\x1b')

        # CSI runs to the first letter or '~', SS3 is always 2 chars,
        # anything else is an Alt-modified single key
        end = len(rest)
        if rest[0] == 'O':
            end = min(2, len(rest))
        elif rest[0] != '[':
            end = 1
        else:
            for i, ch in enumerate(rest[1:], start=1):
                if ch == '\x1b':
                    end = i
                    break
                if ch.isalpha() or ch == '~':
                    end = i + 1
                    break

        seq = rest[:end]
        self._buffer = rest[end:]

        if seq.startswith('[<') and seq[-1] in 'Mm':
            mouse = _decode_sgr_mouse(seq)
            if mouse is not None:
                return mouse

        return KeyEvent(key=self.SEQUENCES.get(seq), raw='\x1b' + seq)
