"""
Cell ordering.

Cells sort by row ascending, then family and qualifier ascending, then
timestamp descending (newest first), then type with the higher code first.
Comparators hold no state; use the module level instances.
"""

from functools import cmp_to_key

from . import constants
from .cell import Cell
from .utils.byteorder import compare as compare_bytes
from .utils.byteorder import search_delimiter_index
from .utils.byteorder import search_delimiter_index_in_reverse


def _compare_ints(left: int, right: int) -> int:
    return (left > right) - (left < right)


class CellComparator:
    """Default ordering for user tables."""

    def __call__(self, left: Cell, right: Cell) -> int:
        return self.compare(left, right)

    def compare(self, left: Cell, right: Cell) -> int:
        diff = self.compare_rows(left, right)
        if diff != 0:
            return diff
        return self.compare_without_row(left, right)

    def compare_rows(self, left: Cell, right: Cell) -> int:
        return self.compare_row_keys(left.row, right.row)

    def compare_row_to_key(self, cell: Cell, row: bytes) -> int:
        return self.compare_row_keys(cell.row, row)

    def compare_row_keys(self, left: bytes, right: bytes) -> int:
        return compare_bytes(left, right)

    def compare_without_row(self, left: Cell, right: Cell) -> int:
        if len(left.family) != len(right.family):
            return self.compare_families(left, right)
        diff = self.compare_columns(left, right)
        if diff != 0:
            return diff
        diff = self.compare_timestamps(left.timestamp, right.timestamp)
        if diff != 0:
            return diff
        return self.compare_types(left, right)

    def compare_columns(self, left: Cell, right: Cell) -> int:
        diff = self.compare_families(left, right)
        if diff != 0:
            return diff
        return self.compare_qualifiers(left, right)

    def compare_families(self, left: Cell, right: Cell) -> int:
        return compare_bytes(left.family, right.family)

    def compare_qualifiers(self, left: Cell, right: Cell) -> int:
        return compare_bytes(left.qualifier, right.qualifier)

    @staticmethod
    def compare_timestamps(left: int, right: int) -> int:
        """Descending: the newer timestamp sorts first."""
        return _compare_ints(right, left)

    @staticmethod
    def compare_types(left: Cell, right: Cell) -> int:
        """Higher type codes sort first, so deletes precede puts."""
        return _compare_ints(int(right.type), int(left.type))

    def sort_key(self):
        return cmp_to_key(self.compare)

    def sort(self, cells):
        return sorted(cells, key=self.sort_key())


class CatalogCellComparator(CellComparator):
    """
    Ordering for the catalog table, whose rows are composite keys of the
    form ``table,startkey,id``. Rows compare segment by segment; at each
    delimiter a row that lacks it sorts after a row that has it.
    """

    @staticmethod
    def _split_row(row: bytes):
        first = search_delimiter_index(row, constants.CATALOG_DELIMITER)
        if first < 0:
            return (1, row, 1, b"", b"")
        far = search_delimiter_index_in_reverse(
            row, constants.CATALOG_DELIMITER, first + 1
        )
        if far < 0:
            return (0, row[:first], 1, row[first + 1 :], b"")
        return (0, row[:first], 0, row[first + 1 : far], row[far + 1 :])

    def compare_row_keys(self, left: bytes, right: bytes) -> int:
        if left == right:
            return 0
        left_parts = self._split_row(left)
        right_parts = self._split_row(right)
        for lpart, rpart in zip(left_parts, right_parts):
            if isinstance(lpart, int):
                diff = _compare_ints(lpart, rpart)
            else:
                diff = compare_bytes(lpart, rpart)
            if diff != 0:
                return diff
        return 0


COMPARATOR = CellComparator()
CATALOG_COMPARATOR = CatalogCellComparator()
META_COMPARATOR = CATALOG_COMPARATOR


def comparator_for(table_name) -> CellComparator:
    """Catalog table rows need the segment aware comparator."""
    if str(table_name) == constants.META_TABLE_NAME:
        return CATALOG_COMPARATOR
    return COMPARATOR
