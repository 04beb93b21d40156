"""
Client side view of one row returned by a Get or a Scan.
"""

import threading
import typing
from decimal import Decimal

from .cell import Cell
from .comparator import COMPARATOR
from .comparator import CellComparator
from .utils import serializers
from .utils.byteorder import binary_search
from .utils.byteorder import to_bytes

VersionMap = typing.Dict[int, bytes]
QualifierMap = typing.Dict[bytes, VersionMap]
FamilyMap = typing.Dict[bytes, QualifierMap]


class Result:
    """
    Wraps the cells of one row.

    ``cells`` must already be sorted by ``comparator``; lookups binary
    search the array and silently return wrong answers otherwise.
    The map views are built lazily once and then shared, so a Result may be
    read from several threads.
    """

    __slots__ = ("_cells", "_exists", "_stale", "_comparator", "_family_map", "_lock")

    def __init__(
        self,
        cells: typing.Sequence[Cell] = None,
        exists: bool = None,
        stale: bool = False,
        comparator: CellComparator = COMPARATOR,
    ):
        self._cells = tuple(cells) if cells else ()
        self._exists = exists
        self._stale = stale
        self._comparator = comparator
        self._family_map = None
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        cells: typing.Sequence[Cell],
        exists: bool = None,
        stale: bool = False,
        comparator: CellComparator = COMPARATOR,
    ) -> "Result":
        return cls(cells, exists=exists, stale=stale, comparator=comparator)

    @property
    def row(self) -> typing.Optional[bytes]:
        if not self._cells:
            return None
        return self._cells[0].row

    @property
    def exists(self) -> typing.Optional[bool]:
        return self._exists

    @property
    def stale(self) -> bool:
        return self._stale

    def raw_cells(self) -> typing.Tuple[Cell, ...]:
        return self._cells

    def list_cells(self) -> typing.Optional[typing.List[Cell]]:
        if not self._cells:
            return None
        return list(self._cells)

    def is_empty(self) -> bool:
        return not self._cells

    def size(self) -> int:
        return len(self._cells)

    def __len__(self):
        return len(self._cells)

    def __iter__(self):
        return iter(self._cells)

    def value(self) -> typing.Optional[bytes]:
        """Value of the first cell."""
        if not self._cells:
            return None
        return self._cells[0].value

    def _column_position(self, family: bytes, qualifier: bytes) -> int:
        probe = Cell.first_on_row_col(self._cells[0].row, family, qualifier)
        pos = binary_search(self._cells, probe, self._comparator)
        if pos < 0:
            pos = -(pos + 1)
        return pos

    def get_column_cells(self, family, qualifier) -> typing.List[Cell]:
        """All versions of one column, newest first."""
        if not self._cells:
            return []
        family = to_bytes(family)
        qualifier = to_bytes(qualifier)
        result = []
        pos = self._column_position(family, qualifier)
        for cell in self._cells[pos:]:
            if not cell.matching_column(family, qualifier):
                break
            result.append(cell)
        return result

    def get_column_latest_cell(self, family, qualifier) -> typing.Optional[Cell]:
        if not self._cells:
            return None
        family = to_bytes(family)
        qualifier = to_bytes(qualifier)
        pos = self._column_position(family, qualifier)
        if pos == len(self._cells):
            return None
        cell = self._cells[pos]
        # the search only yields an insertion point
        if cell.matching_column(family, qualifier):
            return cell
        return None

    def get_latest_value(self, family, qualifier) -> typing.Optional[bytes]:
        cell = self.get_column_latest_cell(family, qualifier)
        if cell is None:
            return None
        return cell.value

    get_value = get_latest_value

    def contains_column(self, family, qualifier) -> bool:
        return self.get_column_latest_cell(family, qualifier) is not None

    def contains_empty_column(self, family, qualifier) -> bool:
        cell = self.get_column_latest_cell(family, qualifier)
        return cell is not None and not cell.value

    def contains_non_empty_column(self, family, qualifier) -> bool:
        cell = self.get_column_latest_cell(family, qualifier)
        return cell is not None and bool(cell.value)

    def _get_typed(self, serializer, family, qualifier, default):
        data = self.get_latest_value(family, qualifier)
        if data is None:
            return default
        return serializer.deserialize(data)

    def get_string_value(self, family, qualifier, default: str = None) -> str:
        return self._get_typed(serializers.STRING, family, qualifier, default)

    def get_bool_value(self, family, qualifier, default: bool = None) -> bool:
        return self._get_typed(serializers.BOOLEAN, family, qualifier, default)

    def get_byte_value(self, family, qualifier, default: int = None) -> int:
        value = self._get_typed(serializers.BYTE, family, qualifier, default)
        return value if value is default else int(value)

    def get_short_value(self, family, qualifier, default: int = None) -> int:
        value = self._get_typed(serializers.SHORT, family, qualifier, default)
        return value if value is default else int(value)

    def get_int_value(self, family, qualifier, default: int = None) -> int:
        value = self._get_typed(serializers.INT, family, qualifier, default)
        return value if value is default else int(value)

    def get_long_value(self, family, qualifier, default: int = None) -> int:
        value = self._get_typed(serializers.LONG, family, qualifier, default)
        return value if value is default else int(value)

    def get_float_value(self, family, qualifier, default: float = None) -> float:
        value = self._get_typed(serializers.FLOAT, family, qualifier, default)
        return value if value is default else float(value)

    def get_double_value(self, family, qualifier, default: float = None) -> float:
        value = self._get_typed(serializers.DOUBLE, family, qualifier, default)
        return value if value is default else float(value)

    def get_decimal_value(self, family, qualifier, default: Decimal = None) -> Decimal:
        return self._get_typed(serializers.DECIMAL, family, qualifier, default)

    def _build_family_map(self) -> FamilyMap:
        # cells arrive family, qualifier ascending and timestamp descending,
        # so dict insertion order is already the iteration order we want
        family_map = {}
        for cell in self._cells:
            qualifier_map = family_map.get(cell.family)
            if qualifier_map is None:
                qualifier_map = {}
                family_map[cell.family] = qualifier_map
            versions = qualifier_map.get(cell.qualifier)
            if versions is None:
                versions = {}
                qualifier_map[cell.qualifier] = versions
            versions[cell.timestamp] = cell.value
        return family_map

    def get_all_versions_map(self) -> typing.Optional[FamilyMap]:
        """family -> qualifier -> timestamp (newest first) -> value"""
        if not self._cells:
            return None
        if self._family_map is None:
            with self._lock:
                if self._family_map is None:
                    self._family_map = self._build_family_map()
        return self._family_map

    get_map = get_all_versions_map

    def get_no_version_map(self) -> typing.Optional[typing.Dict[bytes, typing.Dict[bytes, bytes]]]:
        """family -> qualifier -> latest value"""
        family_map = self.get_all_versions_map()
        if family_map is None:
            return None
        return {
            family: _latest_values(qualifier_map)
            for family, qualifier_map in family_map.items()
        }

    def get_family_map(self, family) -> typing.Optional[typing.Dict[bytes, bytes]]:
        """qualifier -> latest value for one family"""
        family_map = self.get_all_versions_map()
        if family_map is None:
            return None
        return _latest_values(family_map.get(to_bytes(family), {}))

    def __str__(self):
        if not self._cells:
            return "keyvalues=NONE"
        return "keyvalues={" + ", ".join(repr(cell) for cell in self._cells) + "}"

    __repr__ = __str__


def _latest_values(qualifier_map: QualifierMap) -> typing.Dict[bytes, bytes]:
    return {
        qualifier: versions[next(iter(versions))]
        for qualifier, versions in qualifier_map.items()
    }


EMPTY_RESULT = Result()
