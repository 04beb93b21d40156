from ..cell import Cell
from ..cell import CellType
from ..client.transport import HttpTransport
from ..client.transport import Response
from ..comparator import COMPARATOR
from ..exceptions import TransportError

TEST_TABLE = "test_table"


def make_cell(row=b"r1", family=b"f", qualifier=b"q", ts=1, value=b"v", type_=CellType.Put):
    return Cell(row, family, qualifier, ts, type_, value)


def sorted_cells(*cells):
    return COMPARATOR.sort(cells)


class FakeTransport(HttpTransport):
    """
    Scripted transport. ``script`` maps a host (``host:port``) to a list of
    outcomes consumed in order; an outcome is a status code, a Response or
    an exception instance. The last outcome repeats once the list runs out.
    """

    def __init__(self, script=None, default=200):
        self.script = {host: list(outcomes) for host, outcomes in (script or {}).items()}
        self.default = default
        self.calls = []
        self.closed = False

    def _host(self, uri):
        return uri.split("://", 1)[1].split("/", 1)[0]

    def request(self, method, uri, headers=None, body=None, auth=None):
        self.calls.append(
            {"method": method, "uri": uri, "headers": dict(headers or {}), "body": body, "auth": auth}
        )
        outcomes = self.script.get(self._host(uri))
        outcome = self.default
        if outcomes:
            outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            if isinstance(outcome, TransportError):
                outcome.host = uri
            raise outcome
        if isinstance(outcome, Response):
            return outcome
        return Response(outcome, {}, b"")

    def hosts_called(self):
        return [self._host(call["uri"]) for call in self.calls]

    def close(self):
        self.closed = True
