import typing

from .time_range import TimeRange
from ..constants import ALL_VERSIONS
from ..constants import MAX_ROW_LENGTH
from ..exceptions import PreconditionError
from ..utils.byteorder import to_bytes
from ..utils.byteorder import to_string_binary


def check_row(row) -> bytes:
    """Rows must be present, non-empty and at most ``MAX_ROW_LENGTH`` long."""
    row = to_bytes(row)
    if row is None:
        raise PreconditionError("Row buffer is null")
    if len(row) == 0:
        raise PreconditionError("Row length is 0")
    if len(row) > MAX_ROW_LENGTH:
        raise PreconditionError(f"Row length {len(row)} is > {MAX_ROW_LENGTH}")
    return row


class Query:
    """
    Column selection shared by :class:`Get` and :class:`Scan`.

    The family map holds ``None`` for a whole family or a set of qualifiers.
    It is exposed in family byte order with sorted qualifiers.
    """

    def __init__(self):
        self._family_map: typing.Dict[bytes, typing.Optional[set]] = {}
        self._time_range = TimeRange()
        self._max_versions = 1

    def add_family(self, family):
        family = to_bytes(family)
        self._family_map[family] = None
        return self

    def add_column(self, family, qualifier):
        family = to_bytes(family)
        qualifiers = self._family_map.get(family)
        if qualifiers is None:
            qualifiers = set()
            self._family_map[family] = qualifiers
        qualifiers.add(to_bytes(qualifier) or b"")
        return self

    def set_time_range(self, min_stamp: int, max_stamp: int):
        self._time_range = TimeRange(min_stamp, max_stamp)
        return self

    def set_timestamp(self, timestamp: int):
        self._time_range = TimeRange.at(timestamp)
        return self

    def read_all_versions(self):
        self._max_versions = ALL_VERSIONS
        return self

    def read_versions(self, versions: int):
        if versions <= 0:
            raise PreconditionError("versions must be positive")
        self._max_versions = versions
        return self

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    @property
    def max_versions(self) -> int:
        return self._max_versions

    @property
    def family_map(self) -> typing.Dict[bytes, typing.Optional[typing.List[bytes]]]:
        return {
            family: None if qualifiers is None else sorted(qualifiers)
            for family, qualifiers in sorted(self._family_map.items())
        }

    @property
    def family_set(self) -> typing.List[bytes]:
        return sorted(self._family_map)

    def num_families(self) -> int:
        return len(self._family_map)

    def has_families(self) -> bool:
        return bool(self._family_map)

    def fingerprint(self) -> dict:
        if not self._family_map:
            return {"families": "ALL"}
        return {"families": [to_string_binary(f) for f in self.family_set]}

    def _columns_to_map(self, max_cols: int):
        family_columns = {}
        col_count = 0
        for family, qualifiers in self.family_map.items():
            columns = []
            family_columns[to_string_binary(family)] = columns
            if qualifiers is None:
                col_count += 1
                max_cols -= 1
                columns.append("ALL")
                continue
            col_count += len(qualifiers)
            for qualifier in qualifiers:
                max_cols -= 1
                if max_cols <= 0:
                    continue
                columns.append(to_string_binary(qualifier))
        return family_columns, col_count

    def to_map(self, max_cols: int = 5) -> dict:
        result = self.fingerprint()
        family_columns, col_count = self._columns_to_map(max_cols)
        result["families"] = family_columns
        result["maxVersions"] = self._max_versions
        result["timeRange"] = [self._time_range.min, self._time_range.max]
        result["totalColumns"] = col_count
        return result

    def __str__(self):
        return str(self.to_map())
