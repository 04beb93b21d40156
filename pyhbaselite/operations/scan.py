from .query import Query
from ..constants import EMPTY_END_ROW
from ..constants import EMPTY_START_ROW
from ..constants import MAX_ROW_LENGTH
from ..exceptions import PreconditionError
from ..utils.byteorder import closest_row_after_prefix
from ..utils.byteorder import to_bytes
from ..utils.byteorder import to_string_binary


def _check_scan_row(row, name: str) -> bytes:
    row = to_bytes(row) or b""
    if len(row) > MAX_ROW_LENGTH:
        raise PreconditionError(
            f"{name}'s length must be less than or equal to {MAX_ROW_LENGTH} "
            "to meet the criteria for a row key."
        )
    return row


class Scan(Query):
    """
    Range read over ``[start_row, stop_row)``. An empty stop row scans to
    the end of the table. A scan whose start and stop rows are equal and
    non-empty reads exactly that row.
    """

    def __init__(self, start_row=EMPTY_START_ROW, stop_row=EMPTY_END_ROW):
        super().__init__()
        self._start_row = EMPTY_START_ROW
        self._include_start_row = True
        self._stop_row = EMPTY_END_ROW
        self._include_stop_row = False
        self._batch = -1
        self._caching = -1
        self._max_result_size = -1
        self._store_limit = -1
        self._reversed = False
        self._set_start_row(start_row)
        self._set_stop_row(stop_row)

    def _as_get_scan(self):
        if self._start_row and self._start_row == self._stop_row:
            self._include_stop_row = True

    def _set_start_row(self, row):
        self.with_start_row(row)
        self._as_get_scan()
        return self

    def _set_stop_row(self, row):
        self.with_stop_row(row)
        self._as_get_scan()
        return self

    def with_start_row(self, row, inclusive: bool = True):
        self._start_row = _check_scan_row(row, "startRow")
        self._include_start_row = inclusive
        return self

    def with_stop_row(self, row, inclusive: bool = False):
        self._stop_row = _check_scan_row(row, "stopRow")
        self._include_stop_row = inclusive
        return self

    def set_row_prefix_filter(self, prefix):
        """Restricts the scan to rows starting with ``prefix``."""
        if prefix is None:
            self._set_start_row(EMPTY_START_ROW)
            self._set_stop_row(EMPTY_END_ROW)
            return self
        prefix = to_bytes(prefix)
        self._set_start_row(prefix)
        self._set_stop_row(closest_row_after_prefix(prefix))
        return self

    def set_batch(self, batch: int):
        self._batch = batch
        return self

    def set_caching(self, caching: int):
        self._caching = caching
        return self

    def set_max_result_size(self, max_result_size: int):
        """Kept on the scan only; the gateway scanner has no size limit."""
        self._max_result_size = max_result_size
        return self

    def set_max_results_per_column_family(self, limit: int):
        """Kept on the scan only; the gateway scanner has no per family limit."""
        self._store_limit = limit
        return self

    def set_reversed(self, reversed_: bool):
        self._reversed = reversed_
        return self

    @property
    def start_row(self) -> bytes:
        return self._start_row

    @property
    def stop_row(self) -> bytes:
        return self._stop_row

    def include_start_row(self) -> bool:
        return self._include_start_row

    def include_stop_row(self) -> bool:
        return self._include_stop_row

    @property
    def batch(self) -> int:
        return self._batch

    @property
    def caching(self) -> int:
        return self._caching

    @property
    def max_result_size(self) -> int:
        return self._max_result_size

    @property
    def max_results_per_column_family(self) -> int:
        return self._store_limit

    def is_reversed(self) -> bool:
        return self._reversed

    def to_map(self, max_cols: int = 5) -> dict:
        result = super().to_map(max_cols)
        result["startRow"] = to_string_binary(self._start_row)
        result["stopRow"] = to_string_binary(self._stop_row)
        result["maxResultSize"] = self._max_result_size
        return result
