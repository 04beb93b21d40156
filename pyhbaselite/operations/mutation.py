import typing

from .query import check_row
from ..cell import Cell
from ..cell import CellType
from ..cell import check_timestamp
from ..constants import LATEST_TIMESTAMP
from ..exceptions import PreconditionError
from ..utils.byteorder import to_bytes
from ..utils.byteorder import to_string_binary


class Mutation:
    """
    Row level change: cells grouped by family, exposed in family byte order.
    A mutation is built by the caller and consumed once by a table call.
    """

    def __init__(self, row, timestamp: int = LATEST_TIMESTAMP):
        self._row = check_row(row)
        self._timestamp = check_timestamp(timestamp)
        self._family_map: typing.Dict[bytes, typing.List[Cell]] = {}

    @property
    def row(self) -> bytes:
        return self._row

    @property
    def timestamp(self) -> int:
        return self._timestamp

    @property
    def family_cell_map(self) -> typing.Dict[bytes, typing.List[Cell]]:
        return {family: list(cells) for family, cells in sorted(self._family_map.items())}

    def cell_list(self, family) -> typing.List[Cell]:
        """The mutable list of cells for ``family``, created on first use."""
        family = to_bytes(family)
        cells = self._family_map.get(family)
        if cells is None:
            cells = []
            self._family_map[family] = cells
        return cells

    def cells(self) -> typing.List[Cell]:
        return [cell for cells in self.family_cell_map.values() for cell in cells]

    def is_empty(self) -> bool:
        return not self._family_map

    def size(self) -> int:
        return sum(len(cells) for cells in self._family_map.values())

    def num_families(self) -> int:
        return len(self._family_map)

    def fingerprint(self) -> dict:
        return {"families": [to_string_binary(f) for f in sorted(self._family_map)]}

    def to_map(self, max_cols: int = 5) -> dict:
        result = self.fingerprint()
        columns = {}
        col_count = 0
        for family, cells in self.family_cell_map.items():
            details = []
            columns[to_string_binary(family)] = details
            col_count += len(cells)
            for cell in cells:
                max_cols -= 1
                if max_cols <= 0:
                    continue
                details.append(
                    {
                        "qualifier": to_string_binary(cell.qualifier),
                        "timestamp": cell.timestamp,
                        "vlen": len(cell.value),
                    }
                )
        result["families"] = columns
        result["row"] = to_string_binary(self._row)
        result["totalColumns"] = col_count
        return result

    def __str__(self):
        return str(self.to_map())


class Put(Mutation):
    def add_column(self, family, qualifier, value, timestamp: int = None):
        if timestamp is None:
            timestamp = self._timestamp
        if timestamp < 0:
            raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
        cell = Cell(self._row, family, qualifier, timestamp, CellType.Put, value)
        self.cell_list(cell.family).append(cell)
        return self

    def add(self, cell: Cell):
        if cell.row != self._row:
            raise PreconditionError(
                f"The row in {cell!r} doesn't match the original one "
                f"{to_string_binary(self._row)}"
            )
        self.cell_list(cell.family).append(cell)
        return self

    def get(self, family, qualifier) -> typing.List[Cell]:
        """Cells already added for one column."""
        family = to_bytes(family)
        return [
            cell
            for cell in self._family_map.get(family, [])
            if cell.matching_qualifier(qualifier)
        ]

    def has(self, family, qualifier, value=None) -> bool:
        return any(
            value is None or cell.value == to_bytes(value)
            for cell in self.get(family, qualifier)
        )


class Delete(Mutation):
    """
    Without any family the whole row is deleted at the delete's timestamp.
    """

    def add_family(self, family, timestamp: int = None):
        """All versions of all columns of ``family`` at or before ``timestamp``."""
        if timestamp is None:
            timestamp = self._timestamp
        if timestamp < 0:
            raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
        cells = self.cell_list(family)
        cells.clear()
        cells.append(Cell(self._row, family, None, timestamp, CellType.DeleteFamily))
        return self

    def add_family_version(self, family, timestamp: int):
        """All columns of ``family`` with exactly ``timestamp``. Check-and-delete only."""
        self.cell_list(family).append(
            Cell(self._row, family, None, timestamp, CellType.DeleteFamilyVersion)
        )
        return self

    def add_columns(self, family, qualifier, timestamp: int = None):
        """All versions of a column at or before ``timestamp``."""
        if timestamp is None:
            timestamp = self._timestamp
        if timestamp < 0:
            raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
        self.cell_list(family).append(
            Cell(self._row, family, qualifier, timestamp, CellType.DeleteColumn)
        )
        return self

    def add_column(self, family, qualifier, timestamp: int = None):
        """
        One version of a column; the latest when no timestamp is given.
        The gateway has no plain delete for a single version, so only
        check-and-delete accepts these cells.
        """
        if timestamp is None:
            timestamp = self._timestamp
        if timestamp < 0:
            raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
        self.cell_list(family).append(
            Cell(self._row, family, qualifier, timestamp, CellType.Delete)
        )
        return self

    def set_timestamp(self, timestamp: int):
        if timestamp < 0:
            raise PreconditionError(f"Timestamp cannot be negative. ts={timestamp}")
        self._timestamp = timestamp
        return self
