"""
s7link - A high level Python client for Siemens S7 PLCs.

Reads and writes typed process values (BOOL, BYTE, WORD, DWORD, CHAR, INT,
DINT, REAL) by declarative address, on top of a low-level S7 transport
(python-snap7 by default).

Features:
    - Codec registry for the S7 primitive types (big-endian)
    - Data block reads with a single contiguous range transaction
    - Multi-area batched reads and writes in one round trip
    - Connection supervision: liveness checks, keep-alive probes
    - Auto-reconnect with randomized exponential backoff
    - Notifications: connected, disconnected, connect_error, value

Public API (import from s7link):
    S7Client, S7Config, S7Variable, S7Type, Area, S7Event, ConnectionState,
    S7Error and its subclasses, __version__
"""

from s7link.core.client import S7Client
from s7link.core.config import Area, ConnectionState, S7Config, S7Event, S7Type
from s7link.core.exceptions import (
    S7AlreadyConnectedError,
    S7BatchError,
    S7ConnectError,
    S7Error,
    S7InvalidDescriptorError,
    S7NotConnectedError,
    S7TransportError,
    S7UnsupportedTypeError,
)
from s7link.core.variables import S7Variable

__version__ = "1.0.0"
__author__ = "s7link developers"

__all__ = [
    "Area",
    "ConnectionState",
    "S7AlreadyConnectedError",
    "S7BatchError",
    "S7Client",
    "S7Config",
    "S7ConnectError",
    "S7Error",
    "S7Event",
    "S7InvalidDescriptorError",
    "S7NotConnectedError",
    "S7TransportError",
    "S7Type",
    "S7UnsupportedTypeError",
    "S7Variable",
    "__version__",
]
