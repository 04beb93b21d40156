"""
Unsigned lexicographic helpers over row keys and other byte strings.
"""

import typing

from ..exceptions import InvalidRangeError

_SPLIT_HEADER = b"\x01\x00"


def to_bytes(value) -> bytes:
    """Coerce ``str`` (UTF-8) and buffer types to ``bytes``."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"cannot convert {type(value).__name__} to bytes")


def compare(left: bytes, right: bytes) -> int:
    """
    Unsigned lexicographic comparison; a strict prefix sorts first.

    :return: -1, 0 or 1
    """
    # bytes ordering in CPython is already unsigned and prefix-aware
    return (left > right) - (left < right)


def equals(left: bytes, right: bytes) -> bool:
    return left == right


def starts_with(data: bytes, prefix: bytes) -> bool:
    return data.startswith(prefix)


def binary_search(
    sorted_array: typing.Sequence,
    key,
    comparator: typing.Callable = compare,
) -> int:
    """
    Searches ``sorted_array`` for ``key``.

    :param sorted_array: elements sorted by ``comparator``
    :param key: the probe; ``comparator`` is called as ``comparator(key, element)``
    :return: index of a match, otherwise ``-(insertion_point) - 1``
    """
    low = 0
    high = len(sorted_array) - 1
    while low <= high:
        mid = (low + high) >> 1
        cmp = comparator(key, sorted_array[mid])
        if cmp > 0:
            low = mid + 1
        elif cmp < 0:
            high = mid - 1
        else:
            return mid
    return -(low + 1)


def pad_tail(data: bytes, length: int) -> bytes:
    """Append ``length`` zero bytes."""
    return data + b"\x00" * length


def pad_head(data: bytes, length: int) -> bytes:
    """Prepend ``length`` zero bytes."""
    return b"\x00" * length + data


def split_range(
    start: bytes, end: bytes, num_splits: int, inclusive: bool = False
) -> typing.List[bytes]:
    """
    Divides ``[start, end)`` (``[start, end]`` when ``inclusive``) into
    ``num_splits + 1`` roughly equal parts.

    Keys are tail-padded with zeros to a common length and treated as
    big-endian unsigned integers. While the span is too narrow to hold
    strictly increasing boundaries one more zero byte is appended to both
    keys.

    :return: ``num_splits + 2`` boundaries; the first is ``start`` and the
        last is ``end`` exactly as passed in.
    """
    start_padded = start
    end_padded = end
    if len(start) < len(end):
        start_padded = pad_tail(start, len(end) - len(start))
    elif len(end) < len(start):
        end_padded = pad_tail(end, len(start) - len(end))
    if compare(start_padded, end_padded) >= 0:
        raise InvalidRangeError("b <= a")
    if num_splits <= 0:
        raise InvalidRangeError("num cannot be <= 0")

    while True:
        start_int = int.from_bytes(_SPLIT_HEADER + start_padded, "big")
        stop_int = int.from_bytes(_SPLIT_HEADER + end_padded, "big")
        diff = stop_int - start_int
        if inclusive:
            diff += 1
        interval = diff // (num_splits + 1)
        # boundaries stay strictly between start and end
        if interval > 0 and start_int + interval * num_splits < stop_int:
            break
        start_padded += b"\x00"
        end_padded += b"\x00"

    width = len(start_padded) + len(_SPLIT_HEADER)
    splits = [start]
    for i in range(1, num_splits + 1):
        current = start_int + interval * i
        splits.append(current.to_bytes(width, "big")[len(_SPLIT_HEADER) :])
    splits.append(end)
    return splits


def search_delimiter_index(data: bytes, delimiter: bytes) -> int:
    """Index of the first ``delimiter`` byte, -1 if absent."""
    return data.find(delimiter)


def search_delimiter_index_in_reverse(
    data: bytes, delimiter: bytes, start: int = 0
) -> int:
    """Index of the last ``delimiter`` byte at or after ``start``, -1 if absent."""
    return data.rfind(delimiter, start)


def unsigned_copy_and_increment(data: bytes) -> bytes:
    """
    Treats ``data`` as an unsigned big-endian integer and adds one.
    An all-0xFF input grows by one leading byte.
    """
    buf = bytearray(data)
    for i in range(len(buf) - 1, -1, -1):
        if buf[i] == 0xFF:
            buf[i] = 0
        else:
            buf[i] += 1
            return bytes(buf)
    return b"\x01" + bytes(buf)


def closest_row_after_prefix(prefix: bytes) -> bytes:
    """
    Smallest row key greater than every key starting with ``prefix``.
    Returns ``b""`` (scan to the end) when no such key exists.
    """
    stripped = prefix.rstrip(b"\xff")
    if not stripped:
        return b""
    return stripped[:-1] + bytes([stripped[-1] + 1])


def to_string_binary(data: bytes) -> str:
    """Printable ASCII kept as is, everything else rendered as ``\\xHH``."""
    if data is None:
        return "null"
    out = []
    for ch in data:
        if 0x20 <= ch <= 0x7E and ch != 0x5C:
            out.append(chr(ch))
        else:
            out.append(f"\\x{ch:02X}")
    return "".join(out)


def _is_hex_digit(ch: str) -> bool:
    return "A" <= ch <= "F" or "0" <= ch <= "9"


def to_bytes_binary(text: str) -> bytes:
    """Inverse of :func:`to_string_binary`; bogus escapes are dropped."""
    out = bytearray()
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] == "x":
            digits = text[i + 2 : i + 4]
            if len(digits) == 2 and all(_is_hex_digit(d) for d in digits):
                out.append(int(digits, 16))
                i += 4
                continue
            i += 1
            continue
        out.append(ord(ch) & 0xFF)
        i += 1
    return bytes(out)
