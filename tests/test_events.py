"""Tests for the event emitter."""

from __future__ import annotations

import logging

from wirelesstags.core.events import EventSource


def test_on_and_emit():
    source = EventSource()
    received = []
    source.on("data", lambda *args: received.append(args))
    source.emit("data", 1, "two")
    source.emit("other", 3)
    assert received == [(1, "two")]


def test_remove_listener():
    source = EventSource()
    received = []
    remove = source.on("data", received.append)
    assert source.listener_count("data") == 1
    remove()
    remove()
    source.emit("data", 1)
    assert received == []
    assert source.listener_count("data") == 0


def test_failing_listener_does_not_stop_others(caplog):
    """Test a listener error is logged and later listeners still run."""
    source = EventSource()
    received = []

    def broken(value):
        raise RuntimeError("listener failed")

    source.on("data", broken)
    source.on("data", received.append)
    with caplog.at_level(logging.ERROR):
        source.emit("data", 5)

    assert received == [5]
    assert "listener failed" in caplog.text
