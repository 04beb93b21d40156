from ..constants import LATEST_TIMESTAMP
from ..exceptions import PreconditionError


class TimeRange:
    """Half-open ``[min_stamp, max_stamp)`` interval of cell timestamps."""

    __slots__ = ("_min", "_max")

    def __init__(self, min_stamp: int = 0, max_stamp: int = LATEST_TIMESTAMP):
        if min_stamp < 0 or max_stamp < 0:
            raise PreconditionError(
                f"Timestamp cannot be negative. minStamp:{min_stamp}, maxStamp:{max_stamp}"
            )
        if max_stamp < min_stamp:
            raise PreconditionError("maxStamp is smaller than minStamp")
        self._min = min_stamp
        self._max = max_stamp

    @classmethod
    def at(cls, timestamp: int) -> "TimeRange":
        if timestamp < 0 or timestamp == LATEST_TIMESTAMP:
            raise PreconditionError(f"invalid timestamp {timestamp}")
        return cls(timestamp, timestamp + 1)

    @property
    def min(self) -> int:
        return self._min

    @property
    def max(self) -> int:
        return self._max

    def is_all_time(self) -> bool:
        return self._min == 0 and self._max == LATEST_TIMESTAMP

    def within_time_range(self, timestamp: int) -> bool:
        return self._min <= timestamp < self._max

    def __eq__(self, other):
        if not isinstance(other, TimeRange):
            return NotImplemented
        return (self._min, self._max) == (other._min, other._max)

    def __hash__(self):
        return hash((self._min, self._max))

    def __repr__(self):
        return f"TimeRange(min={self._min}, max={self._max})"
