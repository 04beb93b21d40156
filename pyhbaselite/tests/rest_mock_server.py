"""Threaded stand-in for the REST gateway, served from memory.

Implements the subset of the REST API used by
``pyhbaselite.client.table.RemoteTable`` and ``pyhbaselite.client.admin.RemoteAdmin``.
Serves from ``http.server`` on an ephemeral port, one daemon thread per connection.
"""

import base64
import json
import threading
import time
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from urllib.parse import urlparse, parse_qs, unquote_to_bytes


class MockScanner:
    __slots__ = ("rows", "cursor", "batch")

    def __init__(self, rows, batch):
        self.rows = rows
        self.cursor = 0
        self.batch = batch


class RestMockData:
    """Tables, scanners and a request log, guarded by ``lock``."""

    def __init__(self, access_token=None):
        self.lock = threading.Lock()
        # tables[table_name][row_key: bytes][column: bytes] = [(value: bytes, ts: int), ...]
        self.tables: dict = {}
        self.scanners: dict = {}
        self._last_scanner_id = 0
        self.access_token = access_token
        self.version = {
            "REST": "0.0.3",
            "JVM": "Oracle Corporation 1.8.0",
            "OS": "Linux 5.4.0 amd64",
            "Server": "jetty/9.3.27",
            "Jersey": "2.25.1",
        }
        # status codes answered, in order, before normal handling resumes
        self.forced_statuses: list = []
        # (method, path, headers) of every request received
        self.requests: list = []

    def create_table(self, name: str):
        with self.lock:
            self.tables.setdefault(name, {})

    def force_statuses(self, *codes):
        with self.lock:
            self.forced_statuses.extend(codes)

    def put_cell(self, table, row: bytes, column: bytes, value: bytes, ts: int):
        with self.lock:
            table_rows = self.tables.setdefault(table, {})
            _store_version(table_rows.setdefault(row, {}).setdefault(column, []), value, ts)


def _encode64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _decode64(s: str) -> bytes:
    return base64.b64decode(s)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _store_version(versions: list, value: bytes, ts: int):
    """Versions stay newest first; writing an existing timestamp replaces it."""
    for i, (_, t) in enumerate(versions):
        if ts == t:
            versions[i] = (value, ts)
            return
        if ts > t:
            versions.insert(i, (value, ts))
            return
    versions.append((value, ts))


def _column_matches(column: bytes, specs) -> bool:
    if not specs:
        return True
    family = column.split(b":", 1)[0]
    return any(column == spec or family == spec for spec in specs)


def _filter_cells(row_data, column_specs, ts_from, ts_to, max_versions):
    """Versions of the matching columns inside ``[ts_from, ts_to)``, newest first."""
    result = {}
    for column in sorted(row_data):
        if not _column_matches(column, column_specs):
            continue
        selected = [
            (value, ts)
            for value, ts in row_data[column]
            if (ts_from is None or ts >= ts_from) and (ts_to is None or ts < ts_to)
        ]
        if max_versions is not None:
            selected = selected[:max_versions]
        if selected:
            result[column] = selected
    return result


def _rows_to_cellset(rows):
    """``[(row, {column: versions})]`` as a gateway CellSet document."""
    out_rows = []
    for row_key, cells in rows:
        out_cells = []
        for column, versions in cells.items():
            for value, ts in versions:
                out_cells.append({"column": _encode64(column), "$": _encode64(value), "timestamp": ts})
        out_rows.append({"key": _encode64(row_key), "Cell": out_cells})
    return {"Row": out_rows}


def _parse_columns(segment: bytes):
    if not segment:
        return None
    return [c.rstrip(b":") if c.endswith(b":") else c for c in segment.split(b",")]


def _parse_time(segment: bytes):
    if not segment:
        return None, None
    parts = segment.decode().split(",")
    if len(parts) == 2:
        return int(parts[0]), int(parts[1])
    return None, int(parts[0])


def _make_handler_class(data: RestMockData):
    """Handler class closed over ``data``."""

    class Handler(BaseHTTPRequestHandler):
        protocol_version = "HTTP/1.1"

        def log_message(self, format, *args):
            pass

        def _parse(self):
            parsed = urlparse(self.path)
            raw_parts = parsed.path.split("/")[1:]
            if raw_parts and raw_parts[-1] == "" and len(raw_parts) == 1:
                raw_parts = []
            parts = [unquote_to_bytes(p) for p in raw_parts]
            query = parse_qs(parsed.query)
            return parts, query

        def _raw_query_rows(self):
            """``row`` parameters as bytes; parse_qs would mangle binary keys."""
            rows = []
            for pair in urlparse(self.path).query.split("&"):
                key, _, value = pair.partition("=")
                if key == "row":
                    rows.append(unquote_to_bytes(value))
            return rows

        def _drain_body(self) -> bytes:
            length = int(self.headers.get("Content-Length", 0))
            return self.rfile.read(length) if length else b""

        def _json_body(self):
            raw = self._drain_body()
            return json.loads(raw) if raw else {}

        def _reply_json(self, obj, code=200):
            body = json.dumps(obj).encode()
            self.send_response(code)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _reply(self, code=200):
            self.send_response(code)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def _prelude(self):
            """Records the request, applies forced statuses and the access token."""
            with data.lock:
                data.requests.append((self.command, self.path, dict(self.headers)))
                forced = data.forced_statuses.pop(0) if data.forced_statuses else None
            if forced is not None:
                self._drain_body()
                self._reply(forced)
                return None
            parts, query = self._parse()
            if data.access_token is not None:
                if not parts or parts[0].decode() != data.access_token:
                    self._drain_body()
                    self._reply(403)
                    return None
                parts = parts[1:]
            return parts, query

        def do_GET(self):
            parsed = self._prelude()
            if parsed is None:
                return
            parts, query = parsed

            # GET / -> table list
            if not parts or parts == [b""]:
                with data.lock:
                    names = sorted(data.tables)
                return self._reply_json({"table": [{"name": n} for n in names]})

            if parts[0] == b"version" and len(parts) >= 2 and parts[1] == b"rest":
                return self._reply_json(data.version)

            table = parts[0].decode()
            with data.lock:
                known = table in data.tables
            if not known:
                return self._reply(404)

            if len(parts) == 2 and parts[1] == b"exists":
                return self._reply(200)

            # GET /{table}/scanner/{id}
            if len(parts) >= 3 and parts[1] == b"scanner":
                scanner_id = parts[2].decode()
                with data.lock:
                    scanner = data.scanners.get(scanner_id)
                    if scanner is None:
                        return self._reply(404)
                    if scanner.cursor >= len(scanner.rows):
                        return self._reply(204)
                    end = scanner.cursor + scanner.batch
                    batch = scanner.rows[scanner.cursor : end]
                    scanner.cursor = end
                return self._reply_json(_rows_to_cellset(batch))

            max_versions = int(query.get("v", ["1"])[0])

            # GET /{table}/multiget?row=..&row=..
            if len(parts) >= 2 and parts[1] == b"multiget":
                rows = []
                with data.lock:
                    table_rows = data.tables[table]
                    for row_key in self._raw_query_rows():
                        if row_key in table_rows:
                            cells = _filter_cells(table_rows[row_key], None, None, None, max_versions)
                            if cells:
                                rows.append((row_key, cells))
                if not rows:
                    return self._reply(404)
                return self._reply_json(_rows_to_cellset(rows))

            # GET /{table}/{row}[/{columns}[/{time}]]
            row_key = parts[1]
            column_specs = _parse_columns(parts[2]) if len(parts) >= 3 else None
            ts_from, ts_to = _parse_time(parts[3]) if len(parts) >= 4 else (None, None)
            with data.lock:
                table_rows = data.tables[table]
                if row_key not in table_rows:
                    return self._reply(404)
                cells = _filter_cells(table_rows[row_key], column_specs, ts_from, ts_to, max_versions)
            if not cells:
                return self._reply(404)
            return self._reply_json(_rows_to_cellset([(row_key, cells)]))

        def do_PUT(self):
            parsed = self._prelude()
            if parsed is None:
                return
            parts, query = parsed
            if len(parts) < 2:
                self._drain_body()
                return self._reply(400)

            table = parts[0].decode()
            with data.lock:
                known = table in data.tables
            if not known:
                self._drain_body()
                return self._reply(404)

            # PUT /{table}/scanner
            if parts[1] == b"scanner":
                return self._handle_create_scanner(table)

            check = query.get("check", [None])[0]
            if check == "put":
                return self._handle_check_and_put(table, parts[1])
            if check == "delete":
                return self._handle_check_and_delete(table, parts[1])

            # PUT /{table}/{row} and PUT /{table}/$multiput
            body = self._json_body()
            with data.lock:
                table_rows = data.tables[table]
                for row in body.get("Row", []):
                    self._apply_cells(table_rows, _decode64(row["key"]), row.get("Cell", []))
            return self._reply(200)

        def _apply_cells(self, table_rows, row_key, cells):
            row_columns = table_rows.setdefault(row_key, {})
            for cell in cells:
                column = _decode64(cell["column"])
                ts = cell.get("timestamp", _now_ms())
                _store_version(row_columns.setdefault(column, []), _decode64(cell.get("$", "")), ts)

        def do_DELETE(self):
            parsed = self._prelude()
            if parsed is None:
                return
            parts, _ = parsed
            if len(parts) < 2:
                return self._reply(400)

            table = parts[0].decode()

            # DELETE /{table}/scanner/{id}
            if len(parts) >= 3 and parts[1] == b"scanner":
                with data.lock:
                    found = data.scanners.pop(parts[2].decode(), None)
                return self._reply(200 if found is not None else 404)

            with data.lock:
                table_rows = data.tables.get(table)
                if table_rows is None:
                    return self._reply(404)
                row_key = parts[1]
                column_specs = _parse_columns(parts[2]) if len(parts) >= 3 else None
                _, ts = _parse_time(parts[3]) if len(parts) >= 4 else (None, None)
                self._delete(table_rows, row_key, column_specs, ts)
            return self._reply(200)

        @staticmethod
        def _delete(table_rows, row_key, column_specs, ts):
            row_columns = table_rows.get(row_key)
            if row_columns is None:
                return
            for column in list(row_columns):
                if not _column_matches(column, column_specs):
                    continue
                if ts is None:
                    row_columns.pop(column)
                    continue
                row_columns[column] = [(v, t) for v, t in row_columns[column] if t > ts]
                if not row_columns[column]:
                    row_columns.pop(column)
            if not row_columns:
                table_rows.pop(row_key, None)

        def _handle_create_scanner(self, table):
            body = self._json_body()
            start_row = _decode64(body["startRow"]) if "startRow" in body else b""
            end_row = _decode64(body["endRow"]) if "endRow" in body else None
            batch = body.get("batch", 100)
            column_filter = [_decode64(c) for c in body.get("column", [])] or None
            start_time = body.get("startTime")  # ms, inclusive
            end_time = body.get("endTime")  # ms, exclusive
            max_versions = body.get("maxVersions", 1)

            with data.lock:
                table_rows = data.tables.get(table, {})
                selected = []
                for row_key in sorted(table_rows.keys()):
                    if row_key < start_row:
                        continue
                    if end_row is not None and row_key >= end_row:
                        continue
                    cells = _filter_cells(table_rows[row_key], column_filter, start_time, end_time, max_versions)
                    if cells:
                        selected.append((row_key, cells))

                data._last_scanner_id += 1
                scanner_id = str(data._last_scanner_id)
                data.scanners[scanner_id] = MockScanner(selected, batch)

            host, port = self.server.server_address
            prefix = f"/{data.access_token}" if data.access_token is not None else ""
            location = f"http://{host}:{port}{prefix}/{table}/scanner/{scanner_id}"
            self.send_response(201)
            self.send_header("Location", location)
            self.send_header("Content-Length", "0")
            self.end_headers()

        @staticmethod
        def _check(table_rows, row_key, check_cell) -> bool:
            column = _decode64(check_cell["column"])
            expected = _decode64(check_cell.get("$", ""))
            current = table_rows.get(row_key, {}).get(column, [])
            if not expected:
                return not current or not current[0][0]
            return bool(current) and current[0][0] == expected

        def _handle_check_and_put(self, table, row_key):
            body = self._json_body()
            row_cells = body.get("Row", [{}])[0].get("Cell", [])
            if not row_cells:
                return self._reply(400)
            # the last cell is the condition
            check_cell, put_cells = row_cells[-1], row_cells[:-1]
            with data.lock:
                table_rows = data.tables[table]
                if not self._check(table_rows, row_key, check_cell):
                    return self._reply(304)
                self._apply_cells(table_rows, row_key, put_cells)
            return self._reply(200)

        def _handle_check_and_delete(self, table, row_key):
            body = self._json_body()
            row_cells = body.get("Row", [{}])[0].get("Cell", [])
            if not row_cells:
                return self._reply(400)
            check_cell, delete_cells = row_cells[-1], row_cells[:-1]
            with data.lock:
                table_rows = data.tables[table]
                if not self._check(table_rows, row_key, check_cell):
                    return self._reply(304)
                if not delete_cells:
                    table_rows.pop(row_key, None)
                for cell in delete_cells:
                    ts = cell.get("timestamp")
                    self._delete(table_rows, row_key, [_decode64(cell["column"])], ts)
            return self._reply(200)

    return Handler


def start_rest_mock_server(host="127.0.0.1", port=0, access_token=None):
    """Start mock REST gateway in a daemon thread.

    Returns ``(data, server, port)`` where *port* is the actual bound port.
    """
    mock_data = RestMockData(access_token=access_token)
    handler = _make_handler_class(mock_data)
    server = ThreadingHTTPServer((host, port), handler)
    bound_port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return mock_data, server, bound_port
