"""Shared test fixtures: in-memory transport and manually fired timers."""

from datetime import datetime
import random
from typing import Callable, Dict, List, Optional

import pytest

from s7link.core.config import S7Config
from s7link.core.exceptions import S7TransportError
from s7link.layers.transport import CpuInfo, ItemResult


class FakeTransport:
    """Records calls and answers from canned data."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.connected = False
        self.connect_error: Optional[S7TransportError] = None
        self.range_data = b""
        self.range_error: Optional[S7TransportError] = None
        self.batch_results: Optional[List[ItemResult]] = None
        self.probe_error: Optional[S7TransportError] = None
        self.error_texts: Dict[int, str] = {}

    def connect_to(self, address, rack, slot):
        self.calls.append(("connect_to", address, rack, slot))
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def disconnect(self):
        self.calls.append(("disconnect",))
        self.connected = False

    def is_connected(self):
        return self.connected

    def read_range(self, db_number, offset, length):
        self.calls.append(("read_range", db_number, offset, length))
        if self.range_error is not None:
            raise self.range_error
        return self.range_data

    def read_batch(self, items):
        self.calls.append(("read_batch", list(items)))
        if self.batch_results is not None:
            return self.batch_results
        return [ItemResult(code=0, data=b"\x00" * 4) for _ in items]

    def write_batch(self, items):
        self.calls.append(("write_batch", list(items)))
        if self.batch_results is not None:
            return self.batch_results
        return [ItemResult(code=0) for _ in items]

    def error_text(self, code):
        return self.error_texts.get(code, f"Error 0x{code:X}")

    def status_probe(self):
        self.calls.append(("status_probe",))
        if self.probe_error is not None:
            raise self.probe_error

    def cpu_info(self):
        self.calls.append(("cpu_info",))
        return CpuInfo(module_type_name="CPU 315-2 PN/DP", serial_number="S C-123")

    def plc_datetime(self):
        self.calls.append(("plc_datetime",))
        return datetime(2024, 5, 1, 12, 30)

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeTimers:
    """Timer factory whose timers only fire when the test says so."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire(self, timer: FakeTimer) -> None:
        timer.fired = True
        timer.callback()

    def fire_next(self) -> FakeTimer:
        """Fire the oldest pending timer."""
        timer = self.pending[0]
        self.fire(timer)
        return timer


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def config():
    return S7Config(
        name="TestPLC",
        host="10.0.0.5",
        liveness_check_interval=2.0,
        max_backoff_delay=10.0,
        keep_alive_cycle=3,
    )


@pytest.fixture
def rng():
    return random.Random(1234)
