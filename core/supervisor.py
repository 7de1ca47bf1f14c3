"""
Connection supervision.

Owns the connection state machine of one transport handle:

    DISCONNECTED --connect()--> CONNECTING --handshake ok--> CONNECTED
         ^                           |                           |
         +------ handshake failed ---+                           |
         +---- disconnect() / alive check failed ----------------+

While connected, a liveness timer polls the transport every
``liveness_check_interval`` seconds and sends a status probe every
``keep_alive_cycle`` ticks. In auto-reconnect mode, a connection lost
without disconnect() being called is retried with randomized exponential
backoff (factor in [1.3, 1.7), clamped to ``max_backoff_delay``).

Every transport call, including timer ticks, runs under one re-entrant
lock, so a read or write in flight always completes against the handle it
started on.
"""

from contextlib import contextmanager
import ipaddress
import logging
import random
import socket
import threading
from typing import Callable, Iterator, Optional, Protocol

from s7link.core.config import ConnectionState, S7Config, S7Event
from s7link.core.exceptions import (
    S7AlreadyConnectedError,
    S7ConnectError,
    S7Error,
    S7NotConnectedError,
    S7TransportError,
)
from s7link.layers.transport import S7Transport
from s7link.utils.events import EventEmitter
from s7link.utils.logging import get_logger

BACKOFF_MIN_FACTOR = 1.3
BACKOFF_MAX_FACTOR = 1.7


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def start_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Run callback once after delay seconds on a daemon timer thread."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def resolve_host(host: str) -> str:
    """Resolve a host name to an IPv4 address (numeric hosts are returned as-is)."""
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        return socket.gethostbyname(host)


class ConnectionSupervisor:
    """
    Connection lifecycle for one transport handle.

    Args:
        config: Validated client configuration
        transport: Transport handle, owned exclusively by this supervisor
        events: Emitter for connected/disconnected/connect_error
        timer_factory: Schedules one-shot callbacks (default: threading.Timer)
        rng: Random source for backoff jitter
        resolver: Host name resolver
        logger: Logger for this connection (default: the package logger)
    """

    def __init__(
        self,
        config: S7Config,
        transport: S7Transport,
        events: EventEmitter,
        timer_factory: Optional[TimerFactory] = None,
        rng: Optional[random.Random] = None,
        resolver: Optional[Callable[[str], str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._transport = transport
        self._events = events
        self._start_timer = timer_factory or start_timer
        self._rng = rng or random.Random()
        self._resolve = resolver or resolve_host
        self._logger = logger or get_logger()

        self._lock = threading.RLock()
        self._state = ConnectionState.DISCONNECTED

        # Liveness check
        self._alive_timer: Optional[TimerHandle] = None
        self._alive_generation = 0
        self._alive_cycle = 0

        # Auto-reconnect
        self._auto_reconnect = False
        self._retry_timer: Optional[TimerHandle] = None
        self._retry_generation = 0
        self._retry_delay = config.liveness_check_interval

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def retry_delay(self) -> float:
        """Delay (seconds) before the next reconnect attempt."""
        return self._retry_delay

    @property
    def auto_reconnect(self) -> bool:
        return self._auto_reconnect

    def is_connected(self) -> bool:
        """Check if the session is established and the transport agrees."""
        with self._lock:
            return self._state is ConnectionState.CONNECTED and self._transport.is_connected()

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the lock; notifications raised meanwhile are delivered after release."""
        with self._events.deferred(), self._lock:
            yield

    @contextmanager
    def guard(self) -> Iterator[S7Transport]:
        """
        Serialize an operation against the transport.

        Raises:
            S7NotConnectedError: If the session is not established
        """
        with self._locked():
            if self._state is not ConnectionState.CONNECTED:
                raise S7NotConnectedError(f"{self._config.name}: not connected")
            yield self._transport

    def connect(self) -> None:
        """
        Establish the session.

        Raises:
            S7AlreadyConnectedError: If already connected
            S7ConnectError: If name resolution or the handshake fails
        """
        cfg = self._config
        with self._locked():
            if self._state is ConnectionState.CONNECTED:
                raise S7AlreadyConnectedError(f"Already connected to {cfg.name}")
            self._logger.info(
                f"Connecting to {cfg.name} on {cfg.host}:{cfg.port}, Rack={cfg.rack} Slot={cfg.slot}"
            )

            self._state = ConnectionState.CONNECTING
            try:
                address = self._resolve(cfg.host)
            except (OSError, ValueError) as e:
                self._logger.warning(f"Error resolving IP for Host {cfg.host}: {e}")
                self._connect_failed(f"Cannot resolve host {cfg.host}: {e}", e)
            if address != cfg.host:
                self._logger.debug(f"Resolved Host {cfg.host} to IP {address}")

            try:
                self._transport.connect_to(address, cfg.rack, cfg.slot)
            except S7TransportError as e:
                reason = str(e)
                if e.code is not None:
                    reason = self._transport.error_text(e.code).strip() or reason
                self._connect_failed(reason, e)
            except Exception as e:
                self._connect_failed(str(e).strip() or type(e).__name__, e)

            self._state = ConnectionState.CONNECTED
            self._retry_delay = cfg.liveness_check_interval
            self._cancel_retry()
            self._start_alive_check()
            self._logger.info(f"Connected to {cfg.name}")
            self._events.emit(S7Event.CONNECTED)

    def _connect_failed(self, reason: str, cause: Exception) -> None:
        self._state = ConnectionState.DISCONNECTED
        self._logger.warning(f"{self._config.name}: Connect-Error: {reason}")
        self._events.emit(S7Event.CONNECT_ERROR, reason)
        raise S7ConnectError(reason, host=self._config.host, port=self._config.port) from cause

    def disconnect(self) -> None:
        """Close the session. Safe to call repeatedly."""
        with self._locked():
            self._cancel_alive_check()
            self._cancel_retry()
            try:
                self._transport.disconnect()
            except S7TransportError as e:
                self._logger.warning(f"{self._config.name}: error while disconnecting: {e}")
            self._state = ConnectionState.DISCONNECTED
            self._logger.info(f"Disconnected from {self._config.name}")
            self._events.emit(S7Event.DISCONNECTED, True)

    def auto_connect(self) -> ConnectionState:
        """
        Connect and keep reconnecting whenever the connection is lost.

        Only the first connection failure is raised; later attempts are
        retried silently in the background.

        Returns:
            The connection state

        Raises:
            S7ConnectError: If the first attempt fails (a retry is scheduled)
        """
        with self._locked():
            if not self._auto_reconnect:
                self._events.on(S7Event.DISCONNECTED, self._on_disconnected)
                self._auto_reconnect = True
            if self._state is ConnectionState.CONNECTED:
                return self._state

            self._retry_delay = self._config.liveness_check_interval
            try:
                self.connect()
            except S7ConnectError:
                self._schedule_retry()
                raise
            return self._state

    # Liveness check

    def _start_alive_check(self) -> None:
        self._cancel_alive_check()
        self._alive_cycle = 0
        self._arm_alive_timer(self._alive_generation)

    def _arm_alive_timer(self, generation: int) -> None:
        self._alive_timer = self._start_timer(
            self._config.liveness_check_interval,
            lambda: self._alive_tick(generation),
        )

    def _cancel_alive_check(self) -> None:
        self._alive_generation += 1
        if self._alive_timer is not None:
            self._alive_timer.cancel()
            self._alive_timer = None

    def _alive_tick(self, generation: int) -> None:
        with self._locked():
            if generation != self._alive_generation or self._state is not ConnectionState.CONNECTED:
                return

            self._alive_cycle += 1
            cycle = self._config.keep_alive_cycle
            if cycle is not False and self._alive_cycle >= cycle:
                self._alive_cycle = 0
                try:
                    self._transport.status_probe()
                except S7Error as e:
                    self._logger.debug(f"{self._config.name}: keep-alive probe failed: {e}")

            try:
                alive = self._transport.is_connected()
            except S7Error as e:
                self._logger.debug(f"{self._config.name}: connection query failed: {e}")
                alive = False
            if alive:
                self._arm_alive_timer(generation)
                return

            self._logger.warning(f"{self._config.name}: Alive check: failed")
            self._cancel_alive_check()
            self._state = ConnectionState.DISCONNECTED
            self._events.emit(S7Event.DISCONNECTED, False)

    # Auto-reconnect

    def _on_disconnected(self, manual: bool) -> None:
        if manual:
            return
        with self._locked():
            self._retry_delay = self._config.liveness_check_interval
            self._schedule_retry()

    def _schedule_retry(self) -> None:
        self._cancel_retry()
        generation = self._retry_generation
        self._retry_timer = self._start_timer(
            self._retry_delay,
            lambda: self._retry(generation),
        )

    def _cancel_retry(self) -> None:
        self._retry_generation += 1
        if self._retry_timer is not None:
            self._retry_timer.cancel()
            self._retry_timer = None

    def _next_delay(self) -> float:
        factor = BACKOFF_MIN_FACTOR + (BACKOFF_MAX_FACTOR - BACKOFF_MIN_FACTOR) * self._rng.random()
        return min(self._retry_delay * factor, self._config.max_backoff_delay)

    def _retry(self, generation: int) -> None:
        with self._locked():
            if generation != self._retry_generation:
                return
            self._retry_timer = None
            if self._state is ConnectionState.CONNECTED:
                return
            self._logger.info(f"Retry connect to {self._config.name}")
            try:
                self.connect()
            except S7ConnectError:
                self._retry_delay = self._next_delay()
                self._logger.debug(
                    f"{self._config.name}: next retry in {self._retry_delay:.2f}s"
                )
                self._schedule_retry()

    def __repr__(self) -> str:
        return f"ConnectionSupervisor({self._config.name}, {self._state.value})"
