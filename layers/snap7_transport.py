"""
S7 transport backed by python-snap7.

Wraps the pure-Python ``snap7.client.Client``. Multi-item requests are
issued item by item through ``read_area``/``write_area`` with byte
addressing, so every item gets its own result code. Bit items are mapped
to their containing byte: reads extract the bit, writes read-modify-write
the byte so sibling bits are preserved.

Batched writes are not atomic on the wire: items before a failing one
have already been written when the call reports S7BatchError.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from snap7.client import Client
from snap7.error import S7ConnectionError
from snap7.type import Area, Parameter

from s7link.core.config import AreaCode, WordLen
from s7link.core.exceptions import S7TransportError
from s7link.core.planner import BatchItem
from s7link.layers.transport import CpuInfo, ItemResult
from s7link.utils.logging import get_logger

# Bytes transferred per element of each word length
_ELEMENT_SIZE = {
    WordLen.BIT: 1,
    WordLen.BYTE: 1,
    WordLen.WORD: 2,
    WordLen.DWORD: 4,
    WordLen.REAL: 4,
    WordLen.COUNTER: 2,
    WordLen.TIMER: 2,
}

# Areas whose read_area size counts 2-byte timer/counter cells, not bytes
_CELL_AREAS = (AreaCode.TM, AreaCode.CT)

# Result code for an item that failed without a controller error code
ITEM_FAILED = -1


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()
    return str(value or "").strip()


def _item_error(e: Exception) -> ItemResult:
    code = getattr(e, "error_code", None)
    if not isinstance(code, int) or code == 0:
        code = ITEM_FAILED
    return ItemResult(code=code, text=str(e).strip() or type(e).__name__)


class Snap7Transport:
    """
    S7 transport using the Snap7 client.

    Usage:
        transport = Snap7Transport(port=102, recv_timeout=1500)
        client = S7Client(config, transport=transport)
    """

    def __init__(
        self,
        port: int = 102,
        send_timeout: Optional[int] = None,
        recv_timeout: Optional[int] = None,
        ping_timeout: Optional[int] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the transport.

        Args:
            port: Remote TCP port
            send_timeout: Send timeout in ms (None keeps the Snap7 default)
            recv_timeout: Receive timeout in ms
            ping_timeout: Ping timeout in ms
            client: Pre-built snap7 client (a new one is created if omitted)
        """
        self._client = client if client is not None else Client()
        self._port = port
        self._logger = get_logger()

        self._client.set_param(Parameter.RemotePort, port)
        for param, value in (
            (Parameter.SendTimeout, send_timeout),
            (Parameter.RecvTimeout, recv_timeout),
            (Parameter.PingTimeout, ping_timeout),
        ):
            if value is not None:
                self._client.set_param(param, value)

    def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Invoke a snap7 function, mapping its errors to S7TransportError."""
        try:
            return fn(*args)
        except S7TransportError:
            raise
        except Exception as e:
            raise S7TransportError(str(e).strip() or type(e).__name__) from e

    def connect_to(self, address: str, rack: int, slot: int) -> None:
        self._call(self._client.connect, address, rack, slot, self._port)

    def disconnect(self) -> None:
        self._call(self._client.disconnect)

    def is_connected(self) -> bool:
        return bool(self._call(self._client.get_connected))

    def read_range(self, db_number: int, offset: int, length: int) -> bytes:
        return bytes(self._call(self._client.db_read, db_number, offset, length))

    # Multi-item requests

    def _read_bytes(self, area: int, db_number: int, start: int, size: int) -> bytes:
        count = (size + 1) // 2 if area in _CELL_AREAS else size
        data = bytes(self._client.read_area(Area(int(area)), db_number, start, count))
        if len(data) < size:
            raise S7TransportError(f"Short item read: expected {size} byte(s), got {len(data)}")
        return data[:size]

    def _read_item(self, item: BatchItem) -> bytes:
        if item.word_len == WordLen.BIT:
            byte = self._read_bytes(item.area, item.db_number, item.start // 8, 1)[0]
            return bytes([(byte >> (item.start % 8)) & 1])
        size = item.amount * _ELEMENT_SIZE[WordLen(item.word_len)]
        return self._read_bytes(item.area, item.db_number, item.start, size)

    def _write_item(self, item: BatchItem) -> None:
        payload = bytes(item.data or b"")
        if item.word_len == WordLen.BIT:
            if len(payload) != 1:
                raise S7TransportError(f"Bit item data is {len(payload)} byte(s), expected 1")
            offset, mask = item.start // 8, 1 << (item.start % 8)
            byte = self._read_bytes(item.area, item.db_number, offset, 1)[0]
            byte = byte | mask if payload[0] else byte & ~mask
            self._client.write_area(Area(int(item.area)), item.db_number, offset, bytearray([byte]))
            return
        self._client.write_area(Area(int(item.area)), item.db_number, item.start, bytearray(payload))

    def _check_sizes(self, items: Sequence[BatchItem]) -> None:
        for item in items:
            size = item.amount * _ELEMENT_SIZE[WordLen(item.word_len)]
            if len(item.data or b"") != size:
                raise S7TransportError(
                    f"Item data is {len(item.data or b'')} byte(s), expected {size}"
                )

    def _run_items(self, items: Sequence[BatchItem], fn: Callable[[BatchItem], Any]) -> List[ItemResult]:
        results = []
        for item in items:
            try:
                data = fn(item)
            except S7ConnectionError as e:
                raise S7TransportError(str(e).strip() or type(e).__name__) from e
            except Exception as e:
                self._logger.debug(f"Item {item} failed: {e}")
                results.append(_item_error(e))
            else:
                results.append(ItemResult(code=0, data=data or b""))
        return results

    def read_batch(self, items: Sequence[BatchItem]) -> List[ItemResult]:
        return self._run_items(items, self._read_item)

    def write_batch(self, items: Sequence[BatchItem]) -> List[ItemResult]:
        self._check_sizes(items)
        return self._run_items(items, self._write_item)

    def error_text(self, code: int) -> str:
        try:
            return _text(self._client.error_text(code))
        except Exception as e:
            self._logger.debug(f"error_text({code}) failed: {e}")
            return f"Error 0x{code:X}"

    def status_probe(self) -> None:
        self._call(self._client.get_cpu_state)

    def cpu_info(self) -> CpuInfo:
        info = self._call(self._client.get_cpu_info)
        return CpuInfo(
            module_type_name=_text(info.ModuleTypeName),
            serial_number=_text(info.SerialNumber),
            as_name=_text(info.ASName),
            copyright=_text(info.Copyright),
            module_name=_text(info.ModuleName),
        )

    def plc_datetime(self) -> datetime:
        return self._call(self._client.get_plc_datetime)

    def __repr__(self) -> str:
        return f"Snap7Transport(port={self._port})"
