"""Event stream: one background thread merging input with a periodic tick.

The producer thread polls the input fd with a timeout equal to the time
left until the next tick, so input is forwarded the moment it arrives
while ticks stay on their original cadence. Everything it produces goes
through a single FIFO channel to the foreground loop.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from trinitty.cli.core.input import TerminalEvent
from trinitty.errors import ChannelClosedError, InputStreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputEvent:
    """A key or mouse event forwarded from the terminal."""
    event: TerminalEvent


class Tick:
    """Payload-free marker for one elapsed cadence period."""

    _instance: Optional[Tick] = None

    def __new__(cls) -> Tick:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TICK"


TICK = Tick()

Event = Union[InputEvent, Tick]


@dataclass(frozen=True)
class _Hangup:
    """End-of-stream marker queued when the producer goes away."""
    error: Optional[BaseException] = None


class EventChannel:
    """
    Single-producer/single-consumer FIFO of events.

    Nothing is ever dropped or reordered. With a bounded `maxsize` a full
    channel blocks the sender instead of discarding; a blocked send still
    fails promptly once the consumer closes the channel.
    """

    _SEND_POLL = 0.05  # seconds between closed-checks while blocked on a full queue

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[Union[Event, _Hangup]] = queue.Queue(maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, event: Event) -> None:
        """Queue an event. Raises ChannelClosedError once the consumer is gone."""
        self._put(event)

    def _put(self, item: Union[Event, _Hangup]) -> None:
        while True:
            if self._closed.is_set():
                raise ChannelClosedError("event consumer has shut down")
            try:
                self._queue.put(item, timeout=self._SEND_POLL)
                return
            except queue.Full:
                continue

    def recv(self, timeout: Optional[float] = None) -> Event:
        """
        Block until the next event.

        Raises InputStreamError if the producer died on an input failure,
        ChannelClosedError if it hung up otherwise, and queue.Empty if
        `timeout` elapses first.
        """
        item = self._queue.get(timeout=timeout)
        if isinstance(item, _Hangup):
            # Keep the marker so later receives fail the same way
            self._queue.put(item)
            if item.error is not None:
                raise InputStreamError(str(item.error)) from item.error
            raise ChannelClosedError("event producer has stopped")
        return item

    def hangup(self, error: Optional[BaseException] = None) -> None:
        """Producer side: mark end of stream after everything already sent."""
        try:
            self._put(_Hangup(error))
        except ChannelClosedError:
            pass  # nobody left to tell

    def close(self) -> None:
        """Consumer side: refuse further sends."""
        self._closed.set()


class EventSource(Protocol):
    """Anything that can be polled for one terminal event."""

    def read(self, timeout: float) -> Optional[TerminalEvent]:
        ...


class EventProducer:
    """
    Background thread emitting InputEvent and Tick into a channel.

    Usage:
        producer = EventProducer(InputReader(), channel, tick_rate_ns=100_000_000)
        producer.start()
        ...
        producer.stop()
    """

    def __init__(
        self,
        reader: EventSource,
        channel: EventChannel,
        tick_rate_ns: int,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        if tick_rate_ns <= 0:
            raise ValueError("tick_rate_ns must be positive")
        self.reader = reader
        self.channel = channel
        self.tick_rate_ns = tick_rate_ns
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("producer already started")
        self._thread = threading.Thread(target=self.run, name="EventProducer", daemon=True)
        self._thread.start()
        logger.debug("event producer started (tick every %d ns)", self.tick_rate_ns)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the thread to finish and wait for it (at most `timeout` seconds)."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def run(self) -> None:
        """Producer loop body; runs on the background thread."""
        try:
            self._produce()
        except ChannelClosedError:
            logger.debug("event consumer gone, producer exiting")
        except InputStreamError as e:
            logger.error("input stream failed: %s", e)
            self.channel.hangup(e)
        except Exception as e:
            logger.exception("event producer crashed")
            self.channel.hangup(e)
        else:
            self.channel.hangup()
            logger.debug("event producer stopped")

    def _produce(self) -> None:
        last_tick = self._clock()
        while not self._stop.is_set():
            elapsed = self._clock() - last_tick
            remaining = max(0, self.tick_rate_ns - elapsed)

            event = self.reader.read(remaining / 1_000_000_000)
            if event is not None:
                # Input never moves the tick deadline
                self.channel.send(InputEvent(event))

            now = self._clock()
            if now - last_tick >= self.tick_rate_ns:
                self.channel.send(TICK)
                last_tick = now
