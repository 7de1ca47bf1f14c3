"""
Transaction execution.

Runs planned reads and writes against the transport and maps the results
back onto the caller's variables. Batched requests are all-or-nothing at
the call boundary: if any item reports a non-zero result code the whole
call fails with S7BatchError and no values are returned.
"""

import logging
from typing import List, Optional, Sequence

from s7link.core.config import S7Event
from s7link.core.datatypes import decode
from s7link.core.exceptions import (
    S7BatchError,
    S7InvalidDescriptorError,
    S7TransportError,
)
from s7link.core.planner import BatchItem, plan_items, plan_range
from s7link.core.variables import S7Variable
from s7link.layers.transport import ItemResult, S7Transport
from s7link.utils.events import EventEmitter
from s7link.utils.logging import get_logger, log_buffer


class TransactionExecutor:
    """Executes range and batch transactions for one client."""

    def __init__(
        self,
        transport: S7Transport,
        events: EventEmitter,
        name: str = "S7PLC",
        log_raw_data: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self._transport = transport
        self._events = events
        self._name = name
        self._log_raw_data = log_raw_data
        self._logger = logger or get_logger()

    def read_range(self, db_number: int, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Read variables of one data block with a single range read.

        Args:
            db_number: Data block number
            variables: Variables to read (area/db_number are ignored)

        Returns:
            The variables with ``value`` populated

        Raises:
            S7InvalidDescriptorError: If a variable is malformed
            S7TransportError: If the range read fails
        """
        if not variables:
            return []
        if isinstance(db_number, bool) or not isinstance(db_number, int) or db_number < 1:
            raise S7InvalidDescriptorError(f"db_number must be a positive integer, got {db_number!r}")
        for v in variables:
            v.validate()

        byte_range = plan_range(variables)
        self._logger.debug(
            f"{self._name}: ReadDB DB={db_number}, Offset={byte_range.offset}, "
            f"Length={byte_range.length}"
        )
        data = self._transport.read_range(db_number, byte_range.offset, byte_range.length)
        if self._log_raw_data:
            log_buffer(data, "RX", f"{self._name} DB{db_number}.{byte_range.offset}", self._logger)
        if len(data) < byte_range.length:
            raise S7TransportError(
                f"{self._name}: short read from DB{db_number}, "
                f"expected {byte_range.length} bytes, got {len(data)}"
            )

        for v in variables:
            v.value = decode(v.type, data, v.start - byte_range.offset, v.bit)
        self._notify(variables)
        return list(variables)

    def read_batch(self, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Read independently addressed variables in one round trip.

        Raises:
            S7InvalidDescriptorError: If a variable is malformed
            S7BatchError: If any item fails
            S7TransportError: If the request as a whole fails
        """
        if not variables:
            return []
        for v in variables:
            v.validate(require_area=True)

        items = plan_items(variables)
        self._logger.debug(f"{self._name}: ReadMultiVars: {self._describe(variables)}")
        results = self._transport.read_batch(items)
        self._check_results(items, results)

        for v, result in zip(variables, results):
            if self._log_raw_data:
                log_buffer(result.data, "RX", f"{self._name} {self._address(v)}", self._logger)
            v.value = decode(v.type, result.data)
        self._notify(variables)
        return list(variables)

    def write_batch(self, variables: Sequence[S7Variable]) -> List[S7Variable]:
        """
        Write independently addressed variables in one round trip.

        Raises:
            S7InvalidDescriptorError: If a variable is malformed or has no value
            S7BatchError: If any item fails
            S7TransportError: If the request as a whole fails
        """
        if not variables:
            return []
        for v in variables:
            v.validate(require_area=True)
            if v.value is None:
                raise S7InvalidDescriptorError(f"No value to write for {self._address(v)}")

        items = plan_items(variables, with_data=True)
        self._logger.debug(f"{self._name}: WriteMultiVars: {self._describe(variables)}")
        if self._log_raw_data:
            for v, item in zip(variables, items):
                log_buffer(item.data, "TX", f"{self._name} {self._address(v)}", self._logger)
        results = self._transport.write_batch(items)
        self._check_results(items, results)

        self._notify(variables)
        return list(variables)

    def _check_results(self, items: Sequence[BatchItem], results: Sequence[ItemResult]) -> None:
        if len(results) != len(items):
            raise S7TransportError(
                f"{self._name}: transport returned {len(results)} results for {len(items)} items"
            )
        failed = [r for r in results if r.code != 0]
        if failed:
            codes = [r.code for r in failed]
            texts = [r.text or self._transport.error_text(r.code) for r in failed]
            raise S7BatchError(f"{self._name} Errors: " + "; ".join(texts), codes, texts)

    def _notify(self, variables: Sequence[S7Variable]) -> None:
        for v in variables:
            self._events.emit(S7Event.VALUE, v)

    @staticmethod
    def _address(v: S7Variable) -> str:
        area = v.area.value.upper() if v.area is not None else "?"
        if v.db_number:
            area = f"{area}{v.db_number}"
        return f"{area}.{v.start}.{v.bit}:{v.type.value}"

    def _describe(self, variables: Sequence[S7Variable]) -> str:
        return ", ".join(self._address(v) for v in variables)
