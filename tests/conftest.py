"""Shared fakes: a fake monotonic clock, scripted input, a recording terminal."""

import io
from typing import Callable, Optional

import pytest

from trinitty.cli.core.layout import Rect
from trinitty.cli.core.terminal import TerminalSession

NS_PER_MS = 1_000_000


class FakeClock:
    """Monotonic nanosecond clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        return self.now


class ScriptedReader:
    """
    Input source driven by a FakeClock.

    `script` is a list of (at_ms, event). Each read() jumps the clock to
    the next scripted event if it falls inside the timeout, otherwise to
    the end of the timeout. Reaching `horizon_ms` calls `on_horizon`.
    """

    def __init__(
        self,
        clock: FakeClock,
        script: list,
        horizon_ms: int,
        on_horizon: Optional[Callable[[], None]] = None,
    ) -> None:
        self.clock = clock
        self.script = list(script)
        self.horizon = horizon_ms * NS_PER_MS
        self.on_horizon = on_horizon
        self.timeouts: list[float] = []

    def read(self, timeout: float):
        self.timeouts.append(timeout)
        deadline = self.clock.now + round(timeout * 1_000_000_000)
        if self.script and self.script[0][0] * NS_PER_MS <= min(deadline, self.horizon):
            at_ms, event = self.script.pop(0)
            self.clock.now = max(self.clock.now, at_ms * NS_PER_MS)
            return event
        if deadline >= self.horizon:
            self.clock.now = self.horizon
            if self.on_horizon is not None:
                self.on_horizon()
            return None
        self.clock.now = deadline
        return None


class RecordingSession(TerminalSession):
    """TerminalSession writing to a StringIO, with raw mode stubbed out."""

    def __init__(self, size: tuple[int, int] = (80, 24), **kwargs) -> None:
        super().__init__(output=io.StringIO(), input_fd=0, **kwargs)
        self.size = size
        self.calls: list[str] = []
        self.draws: list[tuple[Rect, list[str]]] = []

    def _enter_raw_mode(self) -> None:
        self.calls.append("raw on")

    def _leave_raw_mode(self) -> None:
        self.calls.append("raw off")

    def area(self) -> Rect:
        return Rect(0, 0, *self.size)

    def draw(self, rect, lines) -> None:
        super().draw(rect, lines)
        self.calls.append("draw")
        self.draws.append((rect, list(lines)))

    @property
    def written(self) -> str:
        return self.output.getvalue()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> RecordingSession:
    session = RecordingSession()
    yield session
    session.release()
