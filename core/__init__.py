"""Core S7 client components.

This package provides:
- S7Client: main API (thread-safe, use session() or connect()/disconnect())
- S7Config: configuration (validate() called on client init)
- S7Variable: variable descriptor for reads and writes
- Codec registry (datatypes), address planner, transaction executor and
  connection supervisor
- S7 exception hierarchy: S7Error, S7InvalidDescriptorError,
  S7UnsupportedTypeError, S7AlreadyConnectedError, S7ConnectError,
  S7TransportError, S7NotConnectedError, S7BatchError

Use __all__ as the canonical list of exported names.
"""

from .client import S7Client
from .config import Area, ConnectionState, S7Config, S7Event, S7Type, WordLen
from .datatypes import DATATYPES, PrimitiveCodec, decode, encode, get_codec
from .exceptions import (
    S7AlreadyConnectedError,
    S7BatchError,
    S7ConnectError,
    S7Error,
    S7InvalidDescriptorError,
    S7NotConnectedError,
    S7TransportError,
    S7UnsupportedTypeError,
)
from .planner import BatchItem, ByteRange, plan_items, plan_range
from .supervisor import ConnectionSupervisor
from .variables import S7Variable

__all__ = [
    "Area",
    "BatchItem",
    "ByteRange",
    "ConnectionState",
    "ConnectionSupervisor",
    "DATATYPES",
    "PrimitiveCodec",
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
    "WordLen",
    "decode",
    "encode",
    "get_codec",
    "plan_items",
    "plan_range",
]
