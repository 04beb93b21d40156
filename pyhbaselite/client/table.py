# pylint: disable=logging-fstring-interpolation, too-many-arguments

import typing
from urllib.parse import quote

from .admin import build_path
from .base import SimpleTable
from .client import Client
from .codec import JsonCodec
from .codec import WireCodec
from .codec import cell_set_to_results
from .models import CellModel
from .models import CellSetModel
from .models import cell_set_from_mutations
from .models import row_from_cells
from .models import scanner_from_scan
from ..cell import Cell
from ..cell import CellType
from ..comparator import comparator_for
from ..constants import COLUMN_FAMILY_DELIMITER
from ..constants import LATEST_TIMESTAMP
from ..exceptions import PreconditionError
from ..exceptions import UnexpectedStatusError
from ..operations import Delete
from ..operations import Get
from ..operations import Put
from ..operations import Scan
from ..result import Result
from ..table_name import TableName
from ..utils.byteorder import to_bytes
from ..utils.byteorder import to_string_binary

MULTI_PUT_ROW = "$multiput"
SINGLE_VERSION_DELETES = (CellType.Delete, CellType.DeleteFamilyVersion)


def _encode(data: bytes) -> str:
    return quote(data, safe="")


def _column_spec(family_map: dict) -> str:
    """
    ``family`` for whole families, ``family:qualifier`` otherwise, joined by
    commas. Values are qualifier lists (reads) or cell lists (deletes).
    """
    columns = []
    for family, items in family_map.items():
        if not items:
            columns.append(_encode(family))
            continue
        for item in items:
            qualifier = item.qualifier if isinstance(item, Cell) else item
            if qualifier:
                columns.append(
                    _encode(family) + COLUMN_FAMILY_DELIMITER.decode() + _encode(qualifier)
                )
            else:
                columns.append(_encode(family))
    return ",".join(columns)


def build_row_path(
    access_token: typing.Optional[str],
    table: str,
    row: bytes,
    family_map: dict = None,
    start_time: int = 0,
    end_time: int = LATEST_TIMESTAMP,
    max_versions: int = 1,
) -> str:
    """``/table/row[/columns][/start[,end]][?v=n]``"""
    path = build_path(access_token, table, _encode(row))
    columns = _column_spec(family_map or {})
    time_spec = None
    if start_time >= 0 and end_time != LATEST_TIMESTAMP:
        time_spec = str(start_time)
        if start_time != end_time:
            time_spec += f",{end_time}"
    elif end_time != LATEST_TIMESTAMP:
        time_spec = str(end_time)
    if columns or time_spec is not None:
        path += "/" + columns
    if time_spec is not None:
        path += "/" + time_spec
    if max_versions > 1:
        path += f"?v={max_versions}"
    return path


def _matches_get(cell: Cell, get: Get) -> bool:
    if not get.time_range.within_time_range(cell.timestamp):
        return False
    if not get.has_families():
        return True
    family_map = get.family_map
    if cell.family not in family_map:
        return False
    qualifiers = family_map[cell.family]
    return qualifiers is None or cell.qualifier in qualifiers


class RemoteTable(SimpleTable):
    """
    Table operations over the REST gateway. Every call goes through the
    client's failover and is retried while the gateway answers 509.
    """

    def __init__(
        self,
        client: Client,
        table_name,
        codec: WireCodec = None,
        max_retries: int = 10,
        sleep_time_ms: int = 1000,
        access_token: str = None,
    ):
        self._client = client
        self._table_name = TableName.value_of(table_name)
        self._codec = codec or JsonCodec()
        self._max_retries = max_retries
        self._sleep_time_ms = sleep_time_ms
        self._access_token = access_token
        self._comparator = comparator_for(self._table_name)
        self.logger = client.logger

    @property
    def name(self) -> TableName:
        return self._table_name

    @property
    def client(self) -> Client:
        return self._client

    @property
    def comparator(self):
        return self._comparator

    def _table_segment(self) -> str:
        return quote(str(self._table_name), safe=":")

    def _request(self, method: str, path: str, body: bytes = None, accept_codes=(), read=False):
        headers = {}
        if read:
            headers["Accept"] = self._codec.MIME_TYPE
        if body is not None:
            headers["Content-Type"] = self._codec.MIME_TYPE
        return self._client.request_with_retry(
            method,
            path,
            self._max_retries,
            self._sleep_time_ms,
            headers=headers,
            body=body,
            accept_codes=accept_codes,
        )

    def _results(self, body: bytes) -> typing.List[Result]:
        return cell_set_to_results(self._codec.decode_cell_set(body), self._comparator)

    def get(self, get: Get) -> Result:
        path = build_row_path(
            self._access_token,
            self._table_segment(),
            get.row,
            get.family_map,
            get.time_range.min,
            get.time_range.max,
            get.max_versions,
        )
        resp = self._request("GET", path, accept_codes=(404,), read=True)
        if resp.code == 404:
            return Result(comparator=self._comparator)
        results = self._results(resp.body)
        if not results:
            return Result(comparator=self._comparator)
        if len(results) > 1:
            self.logger.warning(
                f"Too many results for get {to_string_binary(get.row)}, returning first"
            )
        return results[0]

    def get_many(self, gets: typing.Sequence[Get]) -> typing.List[Result]:
        if not gets:
            return []
        query = "&".join(f"row={_encode(get.row)}" for get in gets)
        max_versions = max(get.max_versions for get in gets)
        path = build_path(self._access_token, self._table_segment(), "multiget")
        path += f"?{query}&v={max_versions}"
        resp = self._request("GET", path, accept_codes=(404,), read=True)
        by_row = {}
        if resp.code != 404:
            by_row = {result.row: result for result in self._results(resp.body)}

        results = []
        for get in gets:
            found = by_row.get(get.row)
            cells = [cell for cell in found or () if _matches_get(cell, get)]
            results.append(Result(cells, comparator=self._comparator))
        return results

    def exists(self, get: Get) -> bool:
        return not self.get(get).is_empty()

    def exists_many(self, gets: typing.Sequence[Get]) -> typing.List[bool]:
        return [not result.is_empty() for result in self.get_many(gets)]

    def put(self, put: Put) -> None:
        path = build_path(self._access_token, self._table_segment(), _encode(put.row))
        body = self._codec.encode_cell_set(cell_set_from_mutations([put]))
        self._request("PUT", path, body=body)

    def put_many(self, puts: typing.Sequence[Put]) -> None:
        if not puts:
            return
        path = build_path(self._access_token, self._table_segment(), MULTI_PUT_ROW)
        body = self._codec.encode_cell_set(cell_set_from_mutations(puts))
        self._request("PUT", path, body=body)

    def _check_and_mutate(self, check: str, row, family, qualifier, value, cells) -> bool:
        row = to_bytes(row)
        check_cell = CellModel(
            to_bytes(family) + COLUMN_FAMILY_DELIMITER + (to_bytes(qualifier) or b""),
            LATEST_TIMESTAMP,
            to_bytes(value) or b"",
        )
        model = row_from_cells(row, cells)
        # the gateway takes the last cell as the condition
        cell_set = CellSetModel((model._replace(cells=model.cells + (check_cell,)),))
        path = build_path(self._access_token, self._table_segment(), _encode(row))
        path += f"?check={check}"
        resp = self._request("PUT", path, body=self._codec.encode_cell_set(cell_set), accept_codes=(304,))
        return resp.code != 304

    def check_and_put(self, row, family, qualifier, value, put: Put) -> bool:
        if to_bytes(row) != put.row:
            raise PreconditionError("Action's getRow must match the passed row")
        return self._check_and_mutate("put", row, family, qualifier, value, put.cells())

    def delete(self, delete: Delete) -> None:
        """
        The gateway removes every version at or before the timestamp in the
        path, so cells go out in one request per distinct timestamp.
        Single-version cells have no such form and are rejected.
        """
        table = self._table_segment()
        if not delete.family_cell_map:
            path = build_row_path(
                self._access_token, table, delete.row, None, delete.timestamp, delete.timestamp
            )
            self._request("DELETE", path)
            return

        by_timestamp = {}
        for family, cells in delete.family_cell_map.items():
            for cell in cells:
                if cell.type in SINGLE_VERSION_DELETES:
                    raise PreconditionError(
                        f"Cannot delete a single version of {to_string_binary(family)} "
                        f"at {cell.timestamp} through the gateway; "
                        "use add_columns or add_family"
                    )
                family_map = by_timestamp.setdefault(cell.timestamp, {})
                family_map.setdefault(family, []).append(cell)
        for timestamp, family_map in by_timestamp.items():
            path = build_row_path(
                self._access_token, table, delete.row, family_map, timestamp, timestamp
            )
            self._request("DELETE", path)

    def delete_many(self, deletes: typing.Sequence[Delete]) -> None:
        for delete in deletes:
            self.delete(delete)

    def check_and_delete(self, row, family, qualifier, value, delete: Delete) -> bool:
        if to_bytes(row) != delete.row:
            raise PreconditionError("Action's getRow must match the passed row")
        return self._check_and_mutate("delete", row, family, qualifier, value, delete.cells())

    def get_scanner(self, scan, qualifier=None) -> "Scanner":
        if not isinstance(scan, Scan):
            family = scan
            scan = Scan()
            if qualifier is None:
                scan.add_family(family)
            else:
                scan.add_column(family, qualifier)
        return Scanner(self, scan)

    def close(self) -> None:
        self._client.shutdown()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class Scanner:
    """
    Server side scanner. Created on construction, read in batches and
    removed from the gateway by :meth:`close`.
    """

    def __init__(self, table: RemoteTable, scan: Scan):
        self._table = table
        self._buffer: typing.List[Result] = []
        self._exhausted = False
        self._closed = False
        path = build_path(table._access_token, table._table_segment(), "scanner")
        body = table._codec.encode_scanner(scanner_from_scan(scan))
        resp = table._request("PUT", path, body=body)
        location = resp.header("Location")
        if not location:
            raise UnexpectedStatusError(
                f"scanner creation at {path} returned no location",
                status_code=resp.code,
                path=path,
            )
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    def _fetch(self) -> None:
        resp = self._table._request("GET", self._location, read=True)
        if resp.code in (204, 206) or not resp.body:
            self._exhausted = True
            return
        results = self._table._results(resp.body)
        if not results:
            self._exhausted = True
        self._buffer.extend(results)

    def next(self) -> typing.Optional[Result]:
        """The next row, ``None`` once the scan is exhausted."""
        while not self._buffer and not self._exhausted and not self._closed:
            self._fetch()
        if not self._buffer:
            return None
        return self._buffer.pop(0)

    def next_batch(self, n: int) -> typing.List[Result]:
        results = []
        while len(results) < n:
            result = self.next()
            if result is None:
                break
            results.append(result)
        return results

    def __iter__(self):
        return self

    def __next__(self) -> Result:
        result = self.next()
        if result is None:
            raise StopIteration
        return result

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._buffer = []
        self._table._request("DELETE", self._location, accept_codes=(404,))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
