"""
S7 client.

The S7Client class provides high-level access to Siemens S7 controllers,
combining the connection supervisor with the transaction executor.
"""

from contextlib import contextmanager
import dataclasses
from datetime import datetime
import logging
import random
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence, Union

from s7link.core.config import Area, ConnectionState, S7Config, S7Event
from s7link.core.exceptions import S7InvalidDescriptorError
from s7link.core.executor import TransactionExecutor
from s7link.core.supervisor import ConnectionSupervisor, TimerFactory
from s7link.core.variables import S7Variable
from s7link.layers.transport import CpuInfo, S7Transport
from s7link.utils.events import EventEmitter
from s7link.utils.logging import get_logger


class S7Client:
    """
    High level client for Siemens S7 PLCs.

    Emits ``connected``, ``disconnected`` (manual: bool),
    ``connect_error`` (reason: str) and ``value`` (S7Variable).

    Usage:
        config = S7Config(name="Press", host="192.168.0.10", rack=0, slot=1)
        client = S7Client(config)

        with client.session():
            # Read two fields of DB 10 with one range read
            temp, running = client.read_range(10, [
                S7Variable("REAL", start=0),
                S7Variable("BOOL", start=4, bit=2),
            ])

            # Write a flag bit
            client.write_one(S7Variable("BOOL", start=3, bit=0, area="mk", value=True))
    """

    def __init__(
        self,
        config: Union[S7Config, Mapping[str, Any], None] = None,
        transport: Optional[S7Transport] = None,
        timer_factory: Optional[TimerFactory] = None,
        rng: Optional[random.Random] = None,
        resolver: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize S7 client.

        Args:
            config: Configuration settings or an option mapping (copied;
                defaults if not provided)
            transport: Transport handle (a Snap7Transport if not provided)
            timer_factory: Timer scheduler for liveness checks and retries
            rng: Random source for reconnect backoff
            resolver: Host name resolver
        """
        if config is None:
            self.config = S7Config()
        elif isinstance(config, Mapping):
            self.config = S7Config.from_options(config)
        else:
            self.config = dataclasses.replace(config)
        self.config.validate()

        # Level applies to this client only
        self._logger = get_logger().getChild(self.config.name)
        self._logger.setLevel(getattr(logging, self.config.log_level))

        if transport is None:
            transport = self._default_transport(self.config)
        self._transport = transport

        self._events = EventEmitter()
        self._supervisor = ConnectionSupervisor(
            self.config,
            transport,
            self._events,
            timer_factory=timer_factory,
            rng=rng,
            resolver=resolver,
            logger=self._logger,
        )
        self._executor = TransactionExecutor(
            transport,
            self._events,
            name=self.config.name,
            log_raw_data=self.config.log_raw_data,
            logger=self._logger,
        )

    @staticmethod
    def _default_transport(config: S7Config) -> S7Transport:
        from s7link.layers.snap7_transport import Snap7Transport

        return Snap7Transport(
            port=config.port,
            send_timeout=config.send_timeout,
            recv_timeout=config.recv_timeout,
            ping_timeout=config.ping_timeout,
        )

    # Notifications

    def on(self, event: S7Event, callback: Callable[..., Any]) -> None:
        """Register a notification listener."""
        self._events.on(event, callback)

    def off(self, event: S7Event, callback: Callable[..., Any]) -> None:
        """Remove a notification listener."""
        self._events.off(event, callback)

    # Connection

    @property
    def state(self) -> ConnectionState:
        return self._supervisor.state

    @property
    def is_connected(self) -> bool:
        """Check if connected to the PLC."""
        return self._supervisor.is_connected()

    def connect(self) -> None:
        """
        Establish the connection.

        Raises:
            S7AlreadyConnectedError: If already connected
            S7ConnectError: If the connection fails
        """
        self._supervisor.connect()

    def auto_connect(self) -> ConnectionState:
        """
        Connect and reconnect automatically whenever the connection is lost.

        Raises:
            S7ConnectError: If the first attempt fails (retries continue)
        """
        return self._supervisor.auto_connect()

    def disconnect(self) -> None:
        """Disconnect from the PLC."""
        self._supervisor.disconnect()

    @contextmanager
    def session(self) -> Iterator["S7Client"]:
        """
        Context manager for a connection.

        Usage:
            with client.session():
                # Do operations
        """
        try:
            self.connect()
            yield self
        finally:
            self.disconnect()

    # Data access

    def read_range(self, db_number: int, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Read variables of one data block in a single transaction.

        Args:
            db_number: Data block number
            variables: Variables (start, type, bit) inside the block

        Returns:
            The variables with ``value`` populated
        """
        if not variables:
            return []
        with self._supervisor.guard():
            return self._executor.read_range(db_number, variables)

    def read_batch(self, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Read variables from any areas in one round trip.

        Returns:
            The variables with ``value`` populated

        Raises:
            S7BatchError: If any variable could not be read
        """
        if not variables:
            return []
        with self._supervisor.guard():
            return self._executor.read_batch(variables)

    def write_batch(self, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Write variables to any areas in one round trip.

        Raises:
            S7BatchError: If any variable could not be written
        """
        if not variables:
            return []
        with self._supervisor.guard():
            return self._executor.write_batch(variables)

    def read_one(self, variable: S7Variable) -> S7Variable:
        """Read a single variable."""
        self._check_db_number(variable)
        return self.read_batch([variable])[0]

    def write_one(self, variable: S7Variable) -> S7Variable:
        """Write a single variable."""
        self._check_db_number(variable)
        return self.write_batch([variable])[0]

    # Aliases matching the controller vocabulary
    read_db = read_range
    read_vars = read_batch
    write_vars = write_batch
    read_var = read_one
    write_var = write_one

    @staticmethod
    def _check_db_number(variable: S7Variable) -> None:
        if variable.area is Area.DB and not variable.db_number:
            raise S7InvalidDescriptorError("Param db_number is mandatory for area=db")

    # Controller information

    def get_cpu_info(self) -> CpuInfo:
        """Return the CPU identification of the PLC."""
        with self._supervisor.guard() as transport:
            return transport.cpu_info()

    def get_plc_datetime(self) -> datetime:
        """Return the PLC clock."""
        with self._supervisor.guard() as transport:
            return transport.plc_datetime()

    def __repr__(self) -> str:
        return f"S7Client({self.config.name} {self.config.host}:{self.config.port}, {self.state.value})"
