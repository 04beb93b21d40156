"""
Wire representations of the gateway's resources.

``JsonCodec`` speaks the gateway's JSON schema: row keys, columns and values
are base64 encoded, a cell's value lives under ``$``.
"""

import base64
import json
import typing
from abc import ABC
from abc import abstractmethod

from .models import CellModel
from .models import CellSetModel
from .models import RowModel
from .models import ScannerModel
from .models import TableListModel
from .models import VersionModel
from ..cell import Cell
from ..cell import CellType
from ..comparator import COMPARATOR
from ..constants import COLUMN_FAMILY_DELIMITER
from ..constants import LATEST_TIMESTAMP
from ..result import Result


class WireCodec(ABC):
    """Encodes requests for and decodes responses from the gateway."""

    MIME_TYPE = None

    @abstractmethod
    def encode_cell_set(self, cell_set: CellSetModel) -> bytes:
        """Body for put, multi put and check-and-mutate requests."""

    @abstractmethod
    def decode_cell_set(self, body: bytes) -> CellSetModel:
        """Rows returned by get, multi get and scanner reads."""

    @abstractmethod
    def encode_scanner(self, scanner: ScannerModel) -> bytes:
        """Body of a scanner creation request."""

    @abstractmethod
    def decode_version(self, body: bytes) -> VersionModel:
        """Response of ``/version/rest``."""

    @abstractmethod
    def decode_table_list(self, body: bytes) -> TableListModel:
        """Response of ``/``."""


def _b64enc(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64dec(text: str) -> bytes:
    return base64.b64decode(text)


def _loads(body: bytes):
    # the whole body is decoded at once; there is no size ceiling
    if not body:
        return {}
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body)


class JsonCodec(WireCodec):
    MIME_TYPE = "application/json"

    def encode_cell_set(self, cell_set: CellSetModel) -> bytes:
        rows = []
        for row in cell_set.rows:
            cells = []
            for cell in row.cells:
                item = {"column": _b64enc(cell.column), "$": _b64enc(cell.value)}
                if cell.timestamp != LATEST_TIMESTAMP:
                    item["timestamp"] = cell.timestamp
                cells.append(item)
            rows.append({"key": _b64enc(row.key), "Cell": cells})
        return json.dumps({"Row": rows}).encode("utf-8")

    def decode_cell_set(self, body: bytes) -> CellSetModel:
        payload = _loads(body)
        rows = []
        for row in payload.get("Row") or ():
            cells = tuple(
                CellModel(
                    column=_b64dec(cell["column"]),
                    timestamp=cell.get("timestamp", LATEST_TIMESTAMP),
                    value=_b64dec(cell.get("$") or ""),
                )
                for cell in row.get("Cell") or ()
            )
            rows.append(RowModel(_b64dec(row["key"]), cells))
        return CellSetModel(tuple(rows))

    def encode_scanner(self, scanner: ScannerModel) -> bytes:
        payload = {"batch": scanner.batch}
        if scanner.start_row:
            payload["startRow"] = _b64enc(scanner.start_row)
        if scanner.end_row:
            payload["endRow"] = _b64enc(scanner.end_row)
        if scanner.columns:
            payload["column"] = [_b64enc(column) for column in scanner.columns]
        if scanner.caching:
            payload["caching"] = scanner.caching
        if scanner.start_time:
            payload["startTime"] = scanner.start_time
        if scanner.end_time != LATEST_TIMESTAMP:
            payload["endTime"] = scanner.end_time
        if scanner.max_versions != 1:
            payload["maxVersions"] = scanner.max_versions
        if scanner.reversed:
            payload["reversed"] = True
        return json.dumps(payload).encode("utf-8")

    def decode_version(self, body: bytes) -> VersionModel:
        payload = _loads(body)
        return VersionModel(
            rest=payload.get("REST"),
            jvm=payload.get("JVM"),
            os=payload.get("OS"),
            server=payload.get("Server"),
            jersey=payload.get("Jersey"),
        )

    def decode_table_list(self, body: bytes) -> TableListModel:
        payload = _loads(body)
        return TableListModel(tuple(table["name"] for table in payload.get("table") or ()))


def split_column(column: bytes) -> typing.Tuple[bytes, bytes]:
    """``family:qualifier`` -> ``(family, qualifier)``; a bare family has an empty qualifier."""
    family, _, qualifier = column.partition(COLUMN_FAMILY_DELIMITER)
    return family, qualifier


def cell_set_to_results(cell_set: CellSetModel, comparator=COMPARATOR) -> typing.List[Result]:
    """One Result per row, each sorted with ``comparator``."""
    results = []
    for row in cell_set.rows:
        cells = []
        for cell in row.cells:
            family, qualifier = split_column(cell.column)
            cells.append(
                Cell(row.key, family, qualifier, cell.timestamp, CellType.Put, cell.value)
            )
        results.append(Result.create(comparator.sort(cells), comparator=comparator))
    return results
