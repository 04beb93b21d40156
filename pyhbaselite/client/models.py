"""
Representations exchanged with the REST gateway.
"""

import typing
from collections import namedtuple

from ..cell import CellType
from ..constants import LATEST_TIMESTAMP

CellModel = namedtuple("CellModel", ("column", "timestamp", "value"), defaults=(LATEST_TIMESTAMP, b""))
RowModel = namedtuple("RowModel", ("key", "cells"), defaults=((),))
CellSetModel = namedtuple("CellSetModel", ("rows",), defaults=((),))
VersionModel = namedtuple(
    "VersionModel",
    ("rest", "jvm", "os", "server", "jersey"),
    defaults=(None, None, None, None, None),
)
TableListModel = namedtuple("TableListModel", ("tables",), defaults=((),))

_scanner_fields = (
    "start_row",
    "end_row",
    "columns",
    "batch",
    "caching",
    "start_time",
    "end_time",
    "max_versions",
    "reversed",
)
_scanner_defaults = (b"", b"", (), 100, None, 0, LATEST_TIMESTAMP, 1, False)
ScannerModel = namedtuple("ScannerModel", _scanner_fields, defaults=_scanner_defaults)


def columns_from_family_map(family_map: dict) -> typing.List[bytes]:
    """``family`` for whole families, ``family:qualifier`` otherwise."""
    columns = []
    for family, qualifiers in family_map.items():
        if not qualifiers:
            columns.append(family)
            continue
        for qualifier in qualifiers:
            columns.append(family + b":" + qualifier)
    return columns


def scanner_from_scan(scan, default_batch: int = 100) -> ScannerModel:
    """
    The gateway scans ``[startRow, endRow)``; an exclusive start or an
    inclusive stop moves to the next row key, ``row + b"\\x00"``. Reversed
    scans are sent as given.
    """
    batch = scan.batch if scan.batch > 0 else default_batch
    caching = scan.caching if scan.caching > 0 else None
    start_row = scan.start_row
    end_row = scan.stop_row
    if not scan.is_reversed():
        if start_row and not scan.include_start_row():
            start_row += b"\x00"
        if end_row and scan.include_stop_row():
            end_row += b"\x00"
    return ScannerModel(
        start_row=start_row,
        end_row=end_row,
        columns=tuple(columns_from_family_map(scan.family_map)),
        batch=batch,
        caching=caching,
        start_time=scan.time_range.min,
        end_time=scan.time_range.max,
        max_versions=scan.max_versions,
        reversed=scan.is_reversed(),
    )


def wire_column(cell) -> bytes:
    """Family deletes address the bare family, everything else ``family:qualifier``."""
    if cell.type in (CellType.DeleteFamily, CellType.DeleteFamilyVersion):
        return cell.family
    return cell.column


def row_from_cells(row: bytes, cells) -> RowModel:
    return RowModel(
        row, tuple(CellModel(wire_column(cell), cell.timestamp, cell.value) for cell in cells)
    )


def cell_set_from_mutations(mutations) -> CellSetModel:
    """One row per distinct row key; cells of repeated rows are merged in order."""
    rows = {}
    for mutation in mutations:
        rows.setdefault(mutation.row, []).extend(mutation.cells())
    return CellSetModel(tuple(row_from_cells(row, cells) for row, cells in rows.items()))
