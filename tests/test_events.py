"""Tests for the notification emitter."""

import pytest
from s7link.core.config import S7Event
from s7link.utils.events import EventEmitter


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_emit_in_registration_order(self):
        """Test listeners run in order with the emitted args."""
        emitter = EventEmitter()
        calls = []
        emitter.on(S7Event.DISCONNECTED, lambda manual: calls.append(("a", manual)))
        emitter.on(S7Event.DISCONNECTED, lambda manual: calls.append(("b", manual)))
        emitter.emit(S7Event.DISCONNECTED, False)
        assert calls == [("a", False), ("b", False)]

    def test_string_event_names(self):
        """Test plain strings address the same event as the enum."""
        emitter = EventEmitter()
        calls = []
        emitter.on("connected", lambda: calls.append(1))
        emitter.emit(S7Event.CONNECTED)
        assert calls == [1]

    def test_emit_without_listeners(self):
        """Test emitting with no listener is a no-op."""
        EventEmitter().emit(S7Event.VALUE, object())

    def test_failing_listener_isolated(self):
        """Test a raising listener does not stop the others."""
        emitter = EventEmitter()
        calls = []

        def broken(reason):
            raise ValueError(reason)

        emitter.on(S7Event.CONNECT_ERROR, broken)
        emitter.on(S7Event.CONNECT_ERROR, calls.append)
        emitter.emit(S7Event.CONNECT_ERROR, "refused")
        assert calls == ["refused"]

    def test_off(self):
        """Test removed listeners are not called; unknown ones are ignored."""
        emitter = EventEmitter()
        calls = []
        emitter.on(S7Event.CONNECTED, calls.append)
        emitter.off(S7Event.CONNECTED, calls.append)
        emitter.off(S7Event.CONNECTED, print)
        emitter.emit(S7Event.CONNECTED, 1)
        assert calls == []
        assert emitter.listener_count(S7Event.CONNECTED) == 0

    def test_deferred_delivery(self):
        """Test emits inside deferred() are delivered when the outermost block exits."""
        emitter = EventEmitter()
        calls = []
        emitter.on(S7Event.CONNECT_ERROR, calls.append)
        with emitter.deferred():
            emitter.emit(S7Event.CONNECT_ERROR, "first")
            with emitter.deferred():
                emitter.emit(S7Event.CONNECT_ERROR, "second")
            assert calls == []
        assert calls == ["first", "second"]

    def test_deferred_delivery_on_error(self):
        """Test queued emits are still delivered when the block raises."""
        emitter = EventEmitter()
        calls = []
        emitter.on(S7Event.CONNECT_ERROR, calls.append)
        with pytest.raises(RuntimeError):
            with emitter.deferred():
                emitter.emit(S7Event.CONNECT_ERROR, "refused")
                raise RuntimeError("boom")
        assert calls == ["refused"]
