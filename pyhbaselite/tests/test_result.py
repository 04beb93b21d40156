"""Tests for pyhbaselite.result"""

import threading
from decimal import Decimal

from pyhbaselite.cell import Cell
from pyhbaselite.result import EMPTY_RESULT
from pyhbaselite.result import Result
from pyhbaselite.utils import serializers

from .helpers import make_cell
from .helpers import sorted_cells


def _two_versions():
    return Result.create(
        [
            Cell(b"r1", b"f", b"q", 2, value=b"B"),
            Cell(b"r1", b"f", b"q", 1, value=b"A"),
        ]
    )


def _wide_row():
    return Result.create(
        sorted_cells(
            make_cell(family=b"a", qualifier=b"x", ts=1, value=b"a-x"),
            make_cell(family=b"f", qualifier=b"q", ts=3, value=b"q3"),
            make_cell(family=b"f", qualifier=b"q", ts=1, value=b"q1"),
            make_cell(family=b"f", qualifier=b"r", ts=2, value=b""),
            make_cell(family=b"g", qualifier=b"q", ts=9, value=b"g"),
        )
    )


class TestMaps:
    def test_versions(self):
        result = _two_versions()
        assert result.get_no_version_map()[b"f"][b"q"] == b"B"
        assert result.get_all_versions_map()[b"f"][b"q"] == {2: b"B", 1: b"A"}

    def test_versions_newest_first(self):
        versions = _two_versions().get_all_versions_map()[b"f"][b"q"]
        assert list(versions) == [2, 1]

    def test_idempotent(self):
        result = _wide_row()
        first = result.get_all_versions_map()
        assert result.get_all_versions_map() is first
        assert result.get_no_version_map() == result.get_no_version_map()

    def test_concurrent_build(self):
        result = _wide_row()
        maps = []

        def read():
            maps.append(result.get_all_versions_map())

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert all(m is maps[0] for m in maps)

    def test_family_map(self):
        result = _wide_row()
        assert result.get_family_map(b"f") == {b"q": b"q3", b"r": b""}
        assert result.get_family_map(b"missing") == {}

    def test_empty(self):
        assert EMPTY_RESULT.get_all_versions_map() is None
        assert EMPTY_RESULT.get_no_version_map() is None
        assert EMPTY_RESULT.get_family_map(b"f") is None


class TestLookups:
    def test_latest_value(self):
        result = _wide_row()
        assert result.get_latest_value(b"f", b"q") == b"q3"
        assert result.get_value("a", "x") == b"a-x"
        assert result.get_latest_value(b"g", b"q") == b"g"

    def test_absent_column(self):
        result = _wide_row()
        assert result.get_latest_value(b"f", b"zz") is None
        assert result.get_latest_value(b"b", b"q") is None
        assert result.get_latest_value(b"z", b"q") is None

    def test_column_cells(self):
        cells = _wide_row().get_column_cells(b"f", b"q")
        assert [cell.timestamp for cell in cells] == [3, 1]
        assert _wide_row().get_column_cells(b"f", b"nope") == []

    def test_contains(self):
        result = _wide_row()
        assert result.contains_column(b"f", b"r")
        assert result.contains_empty_column(b"f", b"r")
        assert not result.contains_non_empty_column(b"f", b"r")
        assert result.contains_non_empty_column(b"f", b"q")
        assert not result.contains_column(b"f", b"s")

    def test_size(self):
        result = _wide_row()
        assert result.size() == 5
        assert len(result) == 5
        assert not result.is_empty()
        assert result.row == b"r1"
        assert result.value() == b"a-x"
        assert result.raw_cells()[0].qualifier == b"x"
        assert result.list_cells() == list(result.raw_cells())

    def test_empty(self):
        result = Result()
        assert result.is_empty()
        assert result.size() == 0
        assert result.row is None
        assert result.list_cells() is None
        assert result.get_latest_value(b"f", b"q") is None
        assert str(result) == "keyvalues=NONE"

    def test_str(self):
        assert str(_two_versions()).startswith("keyvalues={r1/f:q/2/Put")


class TestTypedGetters:
    def _result(self):
        return Result.create(
            sorted_cells(
                make_cell(qualifier=b"bool", value=serializers.BOOLEAN.serialize(True)),
                make_cell(qualifier=b"byte", value=serializers.BYTE.serialize(-3)),
                make_cell(qualifier=b"dec", value=serializers.DECIMAL.serialize(Decimal("2.50"))),
                make_cell(qualifier=b"double", value=serializers.DOUBLE.serialize(0.25)),
                make_cell(qualifier=b"float", value=serializers.FLOAT.serialize(1.5)),
                make_cell(qualifier=b"int", value=serializers.INT.serialize(-7)),
                make_cell(qualifier=b"long", value=serializers.LONG.serialize(2 ** 40)),
                make_cell(qualifier=b"short", value=serializers.SHORT.serialize(300)),
                make_cell(qualifier=b"str", value=b"hello"),
            )
        )

    def test_values(self):
        result = self._result()
        assert result.get_bool_value(b"f", b"bool") is True
        assert result.get_decimal_value(b"f", b"dec") == Decimal("2.50")
        assert result.get_double_value(b"f", b"double") == 0.25
        assert result.get_int_value(b"f", b"int") == -7
        assert isinstance(result.get_int_value(b"f", b"int"), int)
        assert result.get_long_value(b"f", b"long") == 2 ** 40
        assert result.get_string_value(b"f", b"str") == "hello"
        assert result.get_byte_value(b"f", b"byte") == -3
        assert result.get_float_value(b"f", b"float") == 1.5
        assert result.get_short_value(b"f", b"short") == 300

    def test_defaults(self):
        result = self._result()
        assert result.get_int_value(b"f", b"missing", default=3) == 3
        assert result.get_string_value(b"f", b"missing") is None
