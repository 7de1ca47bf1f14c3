"""Variable descriptors: what to read from or write to the controller."""

from dataclasses import dataclass
from typing import Optional, Union

from s7link.core.config import Area, S7Type
from s7link.core.datatypes import Value, resolve_type
from s7link.core.exceptions import S7InvalidDescriptorError


def resolve_area(area: Union[Area, str, None]) -> Optional[Area]:
    """Resolve an area tag or area name ("db", "MK", ...) to an Area."""
    if area is None or isinstance(area, Area):
        return area
    if isinstance(area, str):
        try:
            return Area(area.strip().lower())
        except ValueError:
            pass
    raise S7InvalidDescriptorError(f"Unknown area: {area!r}")


@dataclass
class S7Variable:
    """
    A single addressed process value.

    ``area`` and ``db_number`` are only needed for batched reads and writes;
    data block reads address the block explicitly. ``value`` is set by the
    caller before a write and populated by reads.

    Usage:
        S7Variable(S7Type.REAL, start=4, area=Area.DB, db_number=10)
        S7Variable("BOOL", start=0, bit=3, area="mk")
    """

    type: S7Type
    start: int
    bit: int = 0
    area: Optional[Area] = None
    db_number: Optional[int] = None
    value: Optional[Value] = None

    def __post_init__(self) -> None:
        self.type = resolve_type(self.type)
        self.area = resolve_area(self.area)
        if self.bit is None:
            self.bit = 0

    def validate(self, require_area: bool = False) -> None:
        """
        Check the addressing invariants.

        Args:
            require_area: Also require a valid area/DB number combination

        Raises:
            S7InvalidDescriptorError: If the variable cannot be addressed.
        """
        if isinstance(self.start, bool) or not isinstance(self.start, int) or self.start < 0:
            raise S7InvalidDescriptorError(
                f"start must be a non-negative integer, got {self.start!r}"
            )
        if isinstance(self.bit, bool) or not isinstance(self.bit, int) or not 0 <= self.bit <= 7:
            raise S7InvalidDescriptorError(f"bit must be 0-7, got {self.bit!r}")
        if self.bit and self.type is not S7Type.BOOL:
            raise S7InvalidDescriptorError(
                f"bit offset is only valid for BOOL, got bit={self.bit} for {self.type.value}"
            )

        if not require_area:
            return
        if self.area is None:
            raise S7InvalidDescriptorError("area is mandatory for batched access")
        if self.area is Area.DB:
            if (
                isinstance(self.db_number, bool)
                or not isinstance(self.db_number, int)
                or self.db_number < 1
            ):
                raise S7InvalidDescriptorError(
                    f"Param db_number is mandatory for area=db, got {self.db_number!r}"
                )
        elif self.db_number:
            raise S7InvalidDescriptorError(
                f"db_number is only valid for area=db, got db_number={self.db_number} "
                f"for area={self.area.value}"
            )
