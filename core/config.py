"""S7 client configuration and protocol constants."""

from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional, Union


class Area(str, Enum):
    """Controller memory areas addressable by a variable."""

    PE = "pe"  # Peripheral inputs
    PA = "pa"  # Peripheral outputs
    MK = "mk"  # Merker (flag memory)
    DB = "db"  # Data block
    CT = "ct"  # Counters
    TM = "tm"  # Timers


class AreaCode(IntEnum):
    """Transport area codes."""

    PE = 0x81
    PA = 0x82
    MK = 0x83
    DB = 0x84
    CT = 0x1C
    TM = 0x1D


AREA_CODES: Dict[Area, AreaCode] = {
    Area.PE: AreaCode.PE,
    Area.PA: AreaCode.PA,
    Area.MK: AreaCode.MK,
    Area.DB: AreaCode.DB,
    Area.CT: AreaCode.CT,
    Area.TM: AreaCode.TM,
}


class WordLen(IntEnum):
    """Transport word-length codes (addressing granularity of an item)."""

    BIT = 0x01
    BYTE = 0x02
    WORD = 0x04
    DWORD = 0x06
    REAL = 0x08
    COUNTER = 0x1C
    TIMER = 0x1D


class S7Type(str, Enum):
    """Primitive datatypes supported by the codec registry."""

    BOOL = "BOOL"
    BYTE = "BYTE"
    WORD = "WORD"
    DWORD = "DWORD"
    CHAR = "CHAR"
    INT = "INT"
    DINT = "DINT"
    REAL = "REAL"


class S7Event(str, Enum):
    """Notifications emitted by the client."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"  # args: manual (bool)
    CONNECT_ERROR = "connect_error"  # args: reason (str)
    VALUE = "value"  # args: S7Variable


class ConnectionState(Enum):
    """Lifecycle states of a connection supervisor."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# Option names understood by from_options() that differ from field names.
# Both interval options are given in milliseconds.
_OPTION_ALIASES = {
    "livenessCheckInterval": "liveness_check_interval",
    "connectionCheckInterval": "liveness_check_interval",
    "maxBackoffDelay": "max_backoff_delay",
    "maxRetryDelay": "max_backoff_delay",
    "keepAliveCycle": "keep_alive_cycle",
    "alivePkgCycle": "keep_alive_cycle",
}
_MILLISECOND_OPTIONS = (
    "livenessCheckInterval",
    "connectionCheckInterval",
    "maxBackoffDelay",
    "maxRetryDelay",
)


@dataclass
class S7Config:
    """Configuration for an S7 client connection."""

    # Target identity
    name: str = "S7PLC"
    host: str = "localhost"
    port: int = 102
    rack: int = 0
    slot: int = 1

    # Connection supervision (in seconds)
    liveness_check_interval: float = 2.0
    max_backoff_delay: float = 60.0
    # Send a status probe every nth liveness check, False disables it
    keep_alive_cycle: Union[int, bool] = 45

    # Transport timeouts (in milliseconds, None keeps the transport default)
    send_timeout: Optional[int] = None
    recv_timeout: Optional[int] = None
    ping_timeout: Optional[int] = None

    # Logging
    log_level: str = "INFO"
    log_raw_data: bool = False

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "S7Config":
        """Build a config from an option mapping.

        Accepts field names as well as the camelCase option names
        ``livenessCheckInterval``, ``maxBackoffDelay`` (both milliseconds)
        and ``keepAliveCycle``.

        Raises:
            ValueError: If an option name is unknown.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown option {key!r}")
            if key in _MILLISECOND_OPTIONS and value is not None:
                value = float(value) / 1000.0
            kwargs[name] = value
        return cls(**kwargs)

    def validate(self) -> None:
        """Validate and normalize configuration values.

        Raises:
            ValueError: If any value is out of range or invalid.
            TypeError: If name or host is not a string.
        """
        for attr in ("name", "host"):
            value = getattr(self, attr)
            if value is None or not isinstance(value, str):
                raise TypeError(
                    f"{attr} must be a non-empty string, got {type(value).__name__}"
                )
            value = value.strip()
            if not value:
                raise ValueError(f"{attr} must be a non-empty string")
            setattr(self, attr, value)

        try:
            port = int(self.port)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Port must be an integer, got {self.port!r}") from e
        if not 1 <= port <= 65535:
            raise ValueError(f"Port must be 1-65535, got {port}")
        self.port = port

        # Rack 0-7, slot 0-31 (5 bits in the remote TSAP)
        for attr, upper in (("rack", 7), ("slot", 31)):
            try:
                value = int(getattr(self, attr))
            except (TypeError, ValueError) as e:
                raise ValueError(f"{attr} must be an integer, got {getattr(self, attr)!r}") from e
            if not 0 <= value <= upper:
                raise ValueError(f"{attr} must be 0-{upper}, got {value}")
            setattr(self, attr, value)

        for attr in ("liveness_check_interval", "max_backoff_delay"):
            try:
                val = float(getattr(self, attr))
            except (TypeError, ValueError) as e:
                raise ValueError(f"{attr} must be a number, got {getattr(self, attr)!r}") from e
            if val <= 0:
                raise ValueError(f"{attr} must be positive, got {val}")
            setattr(self, attr, val)
        if self.max_backoff_delay < self.liveness_check_interval:
            raise ValueError(
                f"max_backoff_delay ({self.max_backoff_delay}) must be >= "
                f"liveness_check_interval ({self.liveness_check_interval})"
            )

        # bool is an int subclass: only False is accepted as the "off" switch
        if self.keep_alive_cycle is not False:
            if self.keep_alive_cycle is True or self.keep_alive_cycle is None:
                raise ValueError(
                    f"keep_alive_cycle must be a positive integer or False, got {self.keep_alive_cycle!r}"
                )
            try:
                cycle = int(self.keep_alive_cycle)
            except (TypeError, ValueError) as e:
                raise ValueError(
                    f"keep_alive_cycle must be a positive integer or False, got {self.keep_alive_cycle!r}"
                ) from e
            if cycle < 1:
                raise ValueError(f"keep_alive_cycle must be >= 1, got {cycle}")
            self.keep_alive_cycle = cycle

        for attr in ("send_timeout", "recv_timeout", "ping_timeout"):
            value = getattr(self, attr)
            if value is None:
                continue
            try:
                timeout = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{attr} must be an integer (ms), got {value!r}") from e
            if timeout <= 0:
                raise ValueError(f"{attr} must be positive, got {timeout}")
            setattr(self, attr, timeout)

        if not isinstance(self.log_level, str):
            raise ValueError(f"log_level must be a string, got {type(self.log_level).__name__}")
        normalized = self.log_level.strip().upper()
        if normalized not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {self.log_level!r}"
            )
        self.log_level = normalized
        self.log_raw_data = bool(self.log_raw_data)
