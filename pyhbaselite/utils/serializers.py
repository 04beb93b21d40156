from typing import Any
from decimal import Decimal

import numpy as np


class _Serializer:
    def __init__(self, serializer, deserializer, basetype=Any):
        self._serializer = serializer
        self._deserializer = deserializer
        self._basetype = basetype

    def serialize(self, obj):
        return self._serializer(obj)

    def deserialize(self, obj):
        return self._deserializer(obj)

    @property
    def basetype(self):
        return self._basetype


class NumPyValue(_Serializer):
    """Fixed width big-endian scalar, the store's native number encoding."""

    @staticmethod
    def _deserialize(val, dtype):
        if len(val) != dtype.itemsize:
            raise ValueError(
                f"expected {dtype.itemsize} bytes for {dtype.name}, got {len(val)}"
            )
        return np.frombuffer(val, dtype=dtype)[0]

    def __init__(self, dtype):
        def _serialize_scalar(x):
            arr = np.asarray(x, dtype=dtype)
            target_dtype = arr.dtype.newbyteorder(dtype.byteorder)
            return arr.view(target_dtype).tobytes()

        super().__init__(
            serializer=_serialize_scalar,
            deserializer=lambda x: NumPyValue._deserialize(x, dtype),
            basetype=dtype.type,
        )


class String(_Serializer):
    def __init__(self, encoding="utf-8"):
        super().__init__(
            serializer=lambda x: x.encode(encoding),
            deserializer=lambda x: x.decode(encoding),
            basetype=str,
        )


class Boolean(_Serializer):
    def __init__(self):
        super().__init__(
            serializer=lambda x: b"\xff" if x else b"\x00",
            deserializer=lambda x: x[0] != 0,
            basetype=bool,
        )


def serialize_decimal(value: Decimal) -> bytes:
    """4 byte big-endian scale followed by the two's complement unscaled value."""
    sign, digits, exponent = Decimal(value).as_tuple()
    unscaled = int("".join(str(d) for d in digits) or "0")
    if sign:
        unscaled = -unscaled
    scale = -exponent
    length = max(1, (unscaled.bit_length() + 8) // 8)
    return scale.to_bytes(4, "big", signed=True) + unscaled.to_bytes(
        length, "big", signed=True
    )


def deserialize_decimal(raw: bytes) -> Decimal:
    if len(raw) < 5:
        raise ValueError(f"expected at least 5 bytes for a decimal, got {len(raw)}")
    scale = int.from_bytes(raw[:4], "big", signed=True)
    unscaled = int.from_bytes(raw[4:], "big", signed=True)
    sign, digits, _ = Decimal(unscaled).as_tuple()
    return Decimal((sign, digits, -scale))


class DecimalValue(_Serializer):
    def __init__(self):
        super().__init__(
            serializer=serialize_decimal,
            deserializer=deserialize_decimal,
            basetype=Decimal,
        )


BYTE = NumPyValue(np.dtype(">i1"))
SHORT = NumPyValue(np.dtype(">i2"))
INT = NumPyValue(np.dtype(">i4"))
LONG = NumPyValue(np.dtype(">i8"))
FLOAT = NumPyValue(np.dtype(">f4"))
DOUBLE = NumPyValue(np.dtype(">f8"))
STRING = String()
BOOLEAN = Boolean()
DECIMAL = DecimalValue()
