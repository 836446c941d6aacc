"""Unit tests for SignalBus."""
from __future__ import annotations

import logging

import pytest

from vana_signal import SignalBus


def test_subscribe_and_flush():
    """Subscribe handler, publish signal, flush dispatches to handler."""
    bus = SignalBus()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append((signal_name, data))

    bus.subscribe("timer_notify", handler)
    bus.publish("timer_notify", timer_id="a")
    assert received == []
    assert bus.pending == 1

    bus.flush()

    assert received == [("timer_notify", {"timer_id": "a"})]
    assert bus.pending == 0


def test_publish_without_subscribe():
    """Publish with no subscribers, flush is a no-op."""
    bus = SignalBus()
    bus.publish("nobody", value=1)
    assert bus.flush() == 0


def test_unsubscribe():
    """Unsubscribed handlers stop receiving; unknown handlers are ignored."""
    bus = SignalBus()
    received = []

    def handler(signal_name: str, data: dict) -> None:
        received.append(data)

    bus.subscribe("s", handler)
    bus.unsubscribe("s", handler)
    bus.unsubscribe("s", handler)
    bus.unsubscribe("other", handler)
    bus.publish("s")
    bus.flush()
    assert received == []


def test_handler_error_is_isolated(caplog: pytest.LogCaptureFixture):
    """A failing handler is logged; later handlers and signals still run."""
    bus = SignalBus()
    received = []

    def broken(signal_name: str, data: dict) -> None:
        raise RuntimeError("notifier down")

    def handler(signal_name: str, data: dict) -> None:
        received.append(data["n"])

    bus.subscribe("s", broken)
    bus.subscribe("s", handler)
    bus.publish("s", n=1)
    bus.publish("s", n=2)

    with caplog.at_level(logging.ERROR, logger="vana_signal.bus"):
        failures = bus.flush()

    assert failures == 2
    assert received == [1, 2]
    assert len(caplog.records) == 2
    assert caplog.records[0].exc_info is not None


def test_publish_during_flush_waits_for_next_flush():
    """Signals published by a handler are queued for the next flush."""
    bus = SignalBus()
    received = []

    def first(signal_name: str, data: dict) -> None:
        bus.publish("second")

    def second(signal_name: str, data: dict) -> None:
        received.append(signal_name)

    bus.subscribe("first", first)
    bus.subscribe("second", second)
    bus.publish("first")
    bus.flush()
    assert received == []
    bus.flush()
    assert received == ["second"]


def test_clear():
    """clear() drops queued signals."""
    bus = SignalBus()
    received = []
    bus.subscribe("s", lambda name, data: received.append(name))
    bus.publish("s")
    bus.clear()
    bus.flush()
    assert received == []
