"""
Transport interface consumed by the S7 client.

The transport owns the socket and the controller-specific handshake. It
exposes three data primitives (range read, multi-item read, multi-item
write) plus connection management and error-code text lookup. A transport
handle is not safe for concurrent use; the client serializes every call.

Whole-call failures are raised as S7TransportError (with the transport's
error code when one is available). Per-item failures of multi-item
requests are reported through ItemResult.code, 0 meaning success, with an
optional ItemResult.text when the transport already knows the message.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Protocol, Sequence, runtime_checkable

from s7link.core.planner import BatchItem


@dataclass
class ItemResult:
    """Outcome of one item of a multi-item request."""

    code: int
    data: bytes = b""
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.code == 0


@dataclass
class CpuInfo:
    """CPU identification reported by the controller."""

    module_type_name: str = ""
    serial_number: str = ""
    as_name: str = ""
    copyright: str = ""
    module_name: str = ""


@runtime_checkable
class S7Transport(Protocol):
    """Low-level S7 transport primitives."""

    def connect_to(self, address: str, rack: int, slot: int) -> None:
        """Open the session; raises S7TransportError on handshake failure."""
        ...

    def disconnect(self) -> None:
        ...

    def is_connected(self) -> bool:
        ...

    def read_range(self, db_number: int, offset: int, length: int) -> bytes:
        ...

    def read_batch(self, items: Sequence[BatchItem]) -> List[ItemResult]:
        ...

    def write_batch(self, items: Sequence[BatchItem]) -> List[ItemResult]:
        ...

    def error_text(self, code: int) -> str:
        ...

    def status_probe(self) -> None:
        """Lightweight request that keeps an idle session alive."""
        ...

    def cpu_info(self) -> CpuInfo:
        ...

    def plc_datetime(self) -> datetime:
        ...
