"""
A cell is one versioned value of one column of one row.
"""

from enum import IntEnum

from . import constants
from .exceptions import PreconditionError
from .utils.byteorder import to_bytes
from .utils.byteorder import to_string_binary


class CellType(IntEnum):
    """Cell type codes as stored on the wire; higher codes sort first."""

    Minimum = 0
    Put = 4
    Delete = 8
    DeleteFamilyVersion = 10
    DeleteColumn = 12
    DeleteFamily = 14
    Maximum = 255


def check_timestamp(timestamp: int) -> int:
    if timestamp < 0 and timestamp != constants.OLDEST_TIMESTAMP:
        raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
    return timestamp


class Cell:
    """Immutable (row, family, qualifier, timestamp, type, value) tuple."""

    __slots__ = ("_row", "_family", "_qualifier", "_timestamp", "_type", "_value")

    def __init__(
        self,
        row,
        family=None,
        qualifier=None,
        timestamp: int = constants.LATEST_TIMESTAMP,
        type_: CellType = CellType.Put,
        value=None,
    ):
        row = to_bytes(row)
        if row is None:
            raise PreconditionError("Row is null")
        if len(row) > constants.MAX_ROW_LENGTH:
            raise PreconditionError(
                f"Row length {len(row)} is > {constants.MAX_ROW_LENGTH}"
            )
        self._row = row
        self._family = to_bytes(family) or b""
        self._qualifier = to_bytes(qualifier) or b""
        self._timestamp = check_timestamp(int(timestamp))
        self._type = CellType(type_)
        self._value = to_bytes(value) or b""

    @classmethod
    def first_on_row_col(cls, row, family, qualifier) -> "Cell":
        """Probe that sorts before every real version of the column."""
        return cls(
            row,
            family,
            qualifier,
            constants.LATEST_TIMESTAMP,
            CellType.Maximum,
        )

    @property
    def row(self) -> bytes:
        return self._row

    @property
    def family(self) -> bytes:
        return self._family

    @property
    def qualifier(self) -> bytes:
        return self._qualifier

    @property
    def timestamp(self) -> int:
        return self._timestamp

    @property
    def type(self) -> CellType:
        return self._type

    @property
    def value(self) -> bytes:
        return self._value

    @property
    def column(self) -> bytes:
        """``family:qualifier`` as used in REST column specs."""
        return self._family + constants.COLUMN_FAMILY_DELIMITER + self._qualifier

    def matching_row(self, row) -> bool:
        return self._row == to_bytes(row)

    def matching_family(self, family) -> bool:
        return self._family == (to_bytes(family) or b"")

    def matching_qualifier(self, qualifier) -> bool:
        return self._qualifier == (to_bytes(qualifier) or b"")

    def matching_column(self, family, qualifier) -> bool:
        return self.matching_family(family) and self.matching_qualifier(qualifier)

    def is_delete(self) -> bool:
        return CellType.Delete <= self._type < CellType.Maximum

    def _key(self):
        return (
            self._row,
            self._family,
            self._qualifier,
            self._timestamp,
            self._type,
            self._value,
        )

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return (
            f"{to_string_binary(self._row)}/{to_string_binary(self._family)}:"
            f"{to_string_binary(self._qualifier)}/{self._timestamp}/"
            f"{self._type.name}/vlen={len(self._value)}"
        )
