"""Tests for the event channel and the tick/input producer."""

import queue
import threading
import time

import pytest

from conftest import ScriptedReader
from trinitty.cli.core.events import (
    TICK,
    EventChannel,
    EventProducer,
    InputEvent,
    Tick,
)
from trinitty.cli.core.input import KeyEvent
from trinitty.errors import ChannelClosedError, InputStreamError

CADENCE_NS = 100_000_000


def drain(channel: EventChannel) -> list:
    """Everything left in the channel up to the producer's hangup."""
    events = []
    while True:
        try:
            events.append(channel.recv(timeout=1))
        except ChannelClosedError:
            return events


def key(ch: str) -> KeyEvent:
    return KeyEvent(char=ch, raw=ch)


class TestTick:

    def test_singleton(self) -> None:
        assert Tick() is TICK
        assert repr(TICK) == "TICK"


class TestEventChannel:
    """Tests for EventChannel."""

    def test_fifo_order(self) -> None:
        channel = EventChannel()
        events = [InputEvent(key("a")), TICK, InputEvent(key("b")), TICK]
        for event in events:
            channel.send(event)
        assert [channel.recv() for _ in events] == events

    def test_send_after_close_fails(self) -> None:
        channel = EventChannel()
        channel.close()
        assert channel.closed
        with pytest.raises(ChannelClosedError):
            channel.send(TICK)

    def test_hangup_after_pending_events(self) -> None:
        channel = EventChannel()
        channel.send(TICK)
        channel.hangup()
        assert channel.recv() is TICK
        with pytest.raises(ChannelClosedError):
            channel.recv()
        # Still closed on the next attempt
        with pytest.raises(ChannelClosedError):
            channel.recv()

    def test_hangup_with_error(self) -> None:
        channel = EventChannel()
        channel.hangup(InputStreamError("device gone"))
        with pytest.raises(InputStreamError, match="device gone"):
            channel.recv()

    def test_recv_timeout(self) -> None:
        with pytest.raises(queue.Empty):
            EventChannel().recv(timeout=0.01)

    def test_bounded_send_blocks_then_fails_on_close(self) -> None:
        channel = EventChannel(maxsize=1)
        channel.send(TICK)
        errors = []

        def blocked_send() -> None:
            try:
                channel.send(TICK)
            except ChannelClosedError as e:
                errors.append(e)

        sender = threading.Thread(target=blocked_send)
        sender.start()
        time.sleep(0.1)
        assert sender.is_alive()

        channel.close()
        sender.join(timeout=2)
        assert not sender.is_alive()
        assert len(errors) == 1

    def test_bounded_send_never_drops(self) -> None:
        channel = EventChannel(maxsize=2)
        sent = [InputEvent(key(c)) for c in "abcdefgh"]

        def produce() -> None:
            for event in sent:
                channel.send(event)

        sender = threading.Thread(target=produce)
        sender.start()
        received = [channel.recv(timeout=2) for _ in sent]
        sender.join(timeout=2)
        assert received == sent


class TestEventProducer:
    """Cadence and ordering, driven by a fake clock."""

    def _producer(self, clock, script, horizon_ms, channel=None):
        channel = channel or EventChannel()
        producer = EventProducer(None, channel, CADENCE_NS, clock=clock)
        producer.reader = ScriptedReader(clock, script, horizon_ms, on_horizon=producer.stop)
        return producer, channel

    def test_three_ticks_in_350ms(self, clock) -> None:
        producer, channel = self._producer(clock, [], horizon_ms=350)
        producer.run()
        assert drain(channel) == [TICK, TICK, TICK]

    @pytest.mark.parametrize("horizon_ms", [0, 99, 100, 250, 1000, 1234])
    def test_tick_count_matches_elapsed_time(self, clock, horizon_ms) -> None:
        producer, channel = self._producer(clock, [], horizon_ms=horizon_ms)
        producer.run()
        assert len(drain(channel)) == horizon_ms // 100

    def test_first_poll_waits_full_cadence(self, clock) -> None:
        producer, channel = self._producer(clock, [], horizon_ms=150)
        producer.run()
        assert producer.reader.timeouts[0] == pytest.approx(0.1)

    def test_input_forwarded_in_order_without_moving_ticks(self, clock) -> None:
        script = [(50, key("a")), (130, key("b")), (150, key("c"))]
        producer, channel = self._producer(clock, script, horizon_ms=350)
        producer.run()
        assert drain(channel) == [
            InputEvent(key("a")),
            TICK,                   # 100ms
            InputEvent(key("b")),
            InputEvent(key("c")),
            TICK,                   # 200ms
            TICK,                   # 300ms
        ]

    def test_poll_timeout_shrinks_after_input(self, clock) -> None:
        producer, channel = self._producer(clock, [(40, key("a"))], horizon_ms=90)
        producer.run()
        # 100ms to the first tick, then the 60ms still left after input at 40ms
        assert producer.reader.timeouts[:2] == [pytest.approx(0.1), pytest.approx(0.06)]

    def test_burst_of_input_keeps_every_event(self, clock) -> None:
        script = [(10 + i, key(chr(ord("a") + i))) for i in range(20)]
        producer, channel = self._producer(clock, script, horizon_ms=120)
        producer.run()
        events = drain(channel)
        inputs = [e.event.char for e in events if isinstance(e, InputEvent)]
        assert inputs == [chr(ord("a") + i) for i in range(20)]
        assert events.count(TICK) == 1
        assert events[-1] is TICK

    def test_stops_quietly_when_consumer_gone(self, clock) -> None:
        channel = EventChannel()
        channel.close()
        producer, _ = self._producer(clock, [(10, key("a"))], horizon_ms=500, channel=channel)
        producer.run()  # must not raise

    def test_input_failure_reaches_consumer(self, clock) -> None:
        class BrokenReader:
            def read(self, timeout):
                raise InputStreamError("terminal input stream closed")

        channel = EventChannel()
        producer = EventProducer(BrokenReader(), channel, CADENCE_NS, clock=clock)
        producer.run()
        with pytest.raises(InputStreamError, match="closed"):
            channel.recv(timeout=1)

    def test_unexpected_failure_reaches_consumer(self, clock) -> None:
        class CrashingReader:
            def read(self, timeout):
                raise RuntimeError("boom")

        channel = EventChannel()
        EventProducer(CrashingReader(), channel, CADENCE_NS, clock=clock).run()
        with pytest.raises(InputStreamError, match="boom"):
            channel.recv(timeout=1)

    def test_rejects_non_positive_cadence(self) -> None:
        with pytest.raises(ValueError):
            EventProducer(None, EventChannel(), 0)


class TestEventProducerThread:
    """Real thread, real clock."""

    class SleepingReader:
        def read(self, timeout):
            time.sleep(timeout)
            return None

    def test_ticks_on_cadence(self) -> None:
        channel = EventChannel()
        producer = EventProducer(self.SleepingReader(), channel, 20_000_000)
        producer.start()
        time.sleep(0.2)
        producer.stop(timeout=1)
        assert not producer.running

        events = drain(channel)
        assert all(event is TICK for event in events)
        assert 6 <= len(events) <= 11

    def test_start_twice(self) -> None:
        producer = EventProducer(self.SleepingReader(), EventChannel(), 10_000_000)
        producer.start()
        try:
            with pytest.raises(RuntimeError):
                producer.start()
        finally:
            producer.stop(timeout=1)
