"""
Address planning.

Turns a list of variables into wire addresses, in one of two modes:

- Range mode: all variables live in one data block; a single contiguous
  byte range covering every variable is read (gap bytes included).
- Item mode: every variable becomes one addressed item (amount=1) of a
  multi-item request, so variables from different areas share a single
  round trip. Items keep the order of the input variables; results are
  matched back by position.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from s7link.core.config import AREA_CODES, AreaCode, S7Type, WordLen
from s7link.core.datatypes import get_codec
from s7link.core.variables import S7Variable


@dataclass(frozen=True)
class ByteRange:
    """Contiguous byte range inside a data block."""

    offset: int
    length: int


@dataclass
class BatchItem:
    """One addressed item of a multi-item transport request."""

    area: AreaCode
    word_len: WordLen
    db_number: int
    start: int
    amount: int = 1
    data: Optional[bytes] = None


def plan_range(variables: Sequence[S7Variable]) -> Optional[ByteRange]:
    """
    Compute the smallest byte range covering all variables.

    Args:
        variables: Variables of a single data block

    Returns:
        ByteRange, or None for an empty request
    """
    if not variables:
        return None
    offset = min(v.start for v in variables)
    end = max(v.start + get_codec(v.type).size for v in variables)
    return ByteRange(offset=offset, length=end - offset)


def plan_item(variable: S7Variable, with_data: bool = False) -> BatchItem:
    """Build the transport address of a single variable."""
    codec = get_codec(variable.type)
    if variable.type is S7Type.BOOL:
        # Bit-granular addressing: start is counted in bits
        start = variable.start * 8 + (variable.bit or 0)
    else:
        start = variable.start
    return BatchItem(
        area=AREA_CODES[variable.area],
        word_len=codec.word_len,
        db_number=variable.db_number or 0,
        start=start,
        amount=1,
        data=codec.encode(variable.value) if with_data else None,
    )


def plan_items(variables: Sequence[S7Variable], with_data: bool = False) -> List[BatchItem]:
    """
    Build one batch item per variable, in input order.

    Args:
        variables: Validated variables (area set)
        with_data: Encode each variable's value into the item (writes)

    Returns:
        List of BatchItem, same length and order as variables
    """
    return [plan_item(v, with_data=with_data) for v in variables]
