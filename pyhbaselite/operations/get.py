from .query import Query
from .query import check_row
from ..utils.byteorder import to_string_binary


class Get(Query):
    """Reads one row, optionally restricted to families, columns and versions."""

    def __init__(self, row):
        super().__init__()
        self._row = check_row(row)

    @property
    def row(self) -> bytes:
        return self._row

    def to_map(self, max_cols: int = 5) -> dict:
        result = super().to_map(max_cols)
        result["row"] = to_string_binary(self._row)
        return result
