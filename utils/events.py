"""Observer registry for client notifications."""

from collections import defaultdict
from contextlib import contextmanager
from enum import Enum
import threading
from typing import Any, Callable, DefaultDict, Iterator, List

from s7link.utils.logging import get_logger

Listener = Callable[..., Any]


def _key(event) -> str:
    return event.value if isinstance(event, Enum) else event


class EventEmitter:
    """
    Synchronous, fire-and-forget notification fan-out.

    Listeners run in the thread that emits, in registration order. A listener
    that raises is logged and skipped; it never fails the emitting call.
    Inside a deferred() block, emits from that thread are queued and delivered
    when the outermost block exits.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()
        self._local = threading.local()
        self._logger = get_logger()

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for an event."""
        with self._lock:
            self._listeners[_key(event)].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners[_key(event)].remove(listener)
            except ValueError:
                pass

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(_key(event), ()))

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Queue this thread's emits until the outermost deferred block exits."""
        depth = getattr(self._local, "depth", 0)
        if depth == 0:
            self._local.pending = []
        self._local.depth = depth + 1
        try:
            yield
        finally:
            self._local.depth = depth
            if depth == 0:
                pending, self._local.pending = self._local.pending, []
                for event, args in pending:
                    self._dispatch(event, args)

    def emit(self, event: str, *args: Any) -> None:
        """Call every listener of an event with args."""
        if getattr(self._local, "depth", 0):
            self._local.pending.append((event, args))
            return
        self._dispatch(event, args)

    def _dispatch(self, event: str, args: tuple) -> None:
        with self._lock:
            listeners = list(self._listeners.get(_key(event), ()))
        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                self._logger.exception(f"Listener {listener!r} for {event!r} failed")
