"""Render/dispatch loop - the foreground half of the application."""

from __future__ import annotations

import logging
import signal
import threading
from enum import Enum
from typing import Optional

from trinitty.cli.core.events import EventChannel, EventProducer, InputEvent, Event, Tick
from trinitty.cli.core.input import InputReader
from trinitty.cli.core.keymap import Action, KeyMap
from trinitty.cli.core.terminal import TerminalSession
from trinitty.cli.studio.frame import FrameBuilder, title_frame
from trinitty.config import RuntimeConfig
from trinitty.log import configure_logging

logger = logging.getLogger(__name__)

STOP_GRACE = 0.5  # seconds to wait for the producer thread on shutdown

# Signals that would otherwise kill the process without running cleanup
_TERMINATING_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None))
    if sig is not None
)


class AppState(Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


def _exit_on_signal(signum, frame) -> None:
    raise SystemExit(128 + signum)


class RuntimeApp:
    """
    Foreground loop: render a frame, wait for one event, dispatch it.

    The terminal session is held for the whole of run() and released on
    the way out no matter how the loop ends - quit key, a failing draw,
    a dead event producer, Ctrl-C or a termination signal.
    """

    def __init__(
        self,
        session: TerminalSession,
        channel: EventChannel,
        frame_builder: FrameBuilder,
        keymap: Optional[KeyMap] = None,
        producer: Optional[EventProducer] = None,
    ) -> None:
        self.session = session
        self.channel = channel
        self.frame_builder = frame_builder
        self.keymap = keymap or KeyMap()
        self.producer = producer
        self.state = AppState.RUNNING
        self.ticks = 0

    def run(self) -> None:
        """Run until quit. Exceptions propagate after the terminal is restored."""
        if self.state is not AppState.RUNNING:
            raise RuntimeError(f"cannot run from state {self.state.value}")

        previous_handlers = self._install_signal_handlers()
        try:
            with self.session:
                try:
                    if self.producer is not None:
                        self.producer.start()
                    while self.state is AppState.RUNNING:
                        self.render()
                        self.dispatch(self.channel.recv())
                except BaseException as e:
                    logger.error("leaving main loop on %s: %s", type(e).__name__, e)
                    raise
                finally:
                    self._stop_producer()
        finally:
            self._restore_signal_handlers(previous_handlers)
            self._set_state(AppState.TERMINATED)

    def render(self) -> None:
        """Lay out the current frame and draw each region."""
        frame = self.frame_builder()
        for rect, widget in frame.resolve(self.session.area()):
            self.session.draw(rect, widget.render(rect))

    def dispatch(self, event: Event) -> None:
        if isinstance(event, Tick):
            self.on_tick()
        elif isinstance(event, InputEvent):
            action = self.keymap.lookup(event.event)
            if action is Action.QUIT:
                self._set_state(AppState.SHUTTING_DOWN)
        else:
            raise TypeError(f"Unknown event: {event!r}")

    def on_tick(self) -> None:
        """Periodic hook; nothing refreshes on a tick yet."""
        self.ticks += 1

    def _set_state(self, state: AppState) -> None:
        if state is not self.state:
            logger.debug("state %s -> %s", self.state.value, state.value)
            self.state = state

    def _stop_producer(self) -> None:
        self.channel.close()
        if self.producer is not None:
            # One cadence is the longest the producer can sit in its poll
            cadence = self.producer.tick_rate_ns / 1_000_000_000
            self.producer.stop(timeout=max(STOP_GRACE, 2 * cadence))

    @staticmethod
    def _install_signal_handlers() -> dict:
        if threading.current_thread() is not threading.main_thread():
            return {}
        return {sig: signal.signal(sig, _exit_on_signal) for sig in _TERMINATING_SIGNALS}

    @staticmethod
    def _restore_signal_handlers(previous: dict) -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def run_app(config: Optional[RuntimeConfig] = None) -> None:
    """Wire up the real terminal and run the application until quit."""
    config = config or RuntimeConfig.from_env()
    handler = configure_logging(config.log_file)
    logger.info("starting trinitty %s (tick %.3fs)", config.version, config.tick_rate)

    session = TerminalSession()
    channel = EventChannel()
    producer = EventProducer(InputReader(session.input_fd), channel, config.tick_rate_ns)
    app = RuntimeApp(
        session,
        channel,
        frame_builder=lambda: title_frame(config.version),
        producer=producer,
    )
    try:
        app.run()
    finally:
        logger.info("trinitty exiting")
        if handler is not None:
            logging.getLogger("trinitty").removeHandler(handler)
            handler.close()
