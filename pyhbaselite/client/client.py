# pylint: disable=invalid-name, missing-docstring, logging-fstring-interpolation, too-many-arguments

import sys
import time
import typing
import logging
import threading

from .cluster import Cluster
from .transport import Response
from .transport import HttpTransport
from ..exceptions import SERVICE_OVERLOADED
from ..exceptions import TransportError
from ..exceptions import AuthenticationError
from ..exceptions import PreconditionError
from ..exceptions import RetriesExhaustedError
from ..exceptions import error_for_status
from .. import LOGGER_NAME
from ..logging import get_handler

SUPPORTED_PROTOCOLS = ("http", "https")


class Client:
    """
    Executes requests against a cluster of gateway hosts.

    A path (``/table/row``) is tried on every host in turn, starting from a
    random one, until a host answers. A full URI (scanner locations) is
    requested as is. Instances may be shared between threads.
    """

    def __init__(
        self,
        cluster: Cluster,
        protocol: str = "http",
        transport: HttpTransport = None,
        login=None,
        extra_headers: typing.Dict[str, str] = None,
    ):
        if protocol.lower() not in SUPPORTED_PROTOCOLS:
            raise PreconditionError(f"Unsupported protocol {protocol}")
        if transport is None:
            from .transport import RequestsTransport

            transport = RequestsTransport()
        self._cluster = cluster
        self._protocol = protocol.lower()
        self._transport = transport
        self._login = login
        self._headers_lock = threading.Lock()
        self._extra_headers = dict(extra_headers or {})

        self.logger = logging.getLogger(
            f"{LOGGER_NAME}.{self._protocol}://{','.join(cluster.nodes)}"
        )
        self.logger.setLevel(logging.WARNING)
        if not self.logger.handlers:
            sh = get_handler(sys.stdout)
            sh.setLevel(logging.WARNING)
            self.logger.addHandler(sh)

    @property
    def cluster(self) -> Cluster:
        return self._cluster

    @property
    def protocol(self) -> str:
        return self._protocol

    @property
    def extra_headers(self) -> typing.Dict[str, str]:
        return dict(self._extra_headers)

    def add_extra_header(self, name: str, value: str) -> None:
        with self._headers_lock:
            headers = dict(self._extra_headers)
            headers[name] = value
            self._extra_headers = headers

    def remove_extra_header(self, name: str) -> None:
        with self._headers_lock:
            headers = dict(self._extra_headers)
            headers.pop(name, None)
            self._extra_headers = headers

    def shutdown(self) -> None:
        self._transport.close()

    def execute_path_only(
        self, method: str, path: str, headers=None, body: bytes = None
    ) -> Response:
        if self._cluster.is_empty():
            raise TransportError("Cluster is empty")
        last_error = None
        for host in self._cluster.iter_failover_order():
            self._cluster.last_host = host
            uri = f"{self._protocol}://{host}{path}"
            try:
                return self.execute_uri(method, uri, headers=headers, body=body)
            except AuthenticationError:
                raise
            except TransportError as err:
                self.logger.debug(f"{method} {uri} failed, trying next host: {err}")
                last_error = err
        raise last_error

    def execute_uri(
        self, method: str, uri: str, headers=None, body: bytes = None
    ) -> Response:
        request_headers = dict(self._extra_headers)
        if headers:
            request_headers.update(headers)

        auth = None
        if self._login is not None:
            auth = self._login.login()

        start = time.time()
        resp = self._transport.request(
            method, uri, headers=request_headers, body=body, auth=auth
        )
        elapsed_ms = int((time.time() - start) * 1000)
        self.logger.debug(
            f"{method} {uri} {resp.code} in {elapsed_ms} ms",
            extra={
                "method": method,
                "uri": uri,
                "status": resp.code,
                "elapsed_ms": elapsed_ms,
            },
        )
        return resp

    def execute(
        self, method: str, path: str, headers=None, body: bytes = None
    ) -> Response:
        """Paths go through failover, absolute URIs are requested directly."""
        if path.startswith("/"):
            return self.execute_path_only(method, path, headers=headers, body=body)
        return self.execute_uri(method, path, headers=headers, body=body)

    def head(self, path: str, headers=None) -> Response:
        return self.execute("HEAD", path, headers=headers)

    def get(self, path: str, accept: str = None, headers=None) -> Response:
        headers = dict(headers or {})
        if accept:
            headers["Accept"] = accept
        return self.execute("GET", path, headers=headers)

    def put(self, path: str, content_type: str, body: bytes, headers=None) -> Response:
        headers = dict(headers or {})
        headers["Content-Type"] = content_type
        return self.execute("PUT", path, headers=headers, body=body)

    def post(self, path: str, content_type: str, body: bytes, headers=None) -> Response:
        headers = dict(headers or {})
        headers["Content-Type"] = content_type
        return self.execute("POST", path, headers=headers, body=body)

    def delete(self, path: str, headers=None) -> Response:
        return self.execute("DELETE", path, headers=headers)

    def request_with_retry(
        self,
        method: str,
        path: str,
        max_retries: int,
        sleep_time_ms: int,
        headers=None,
        body: bytes = None,
        accept_codes: typing.Iterable[int] = (404,),
    ) -> Response:
        """
        2xx and ``accept_codes`` responses are returned. 509 sleeps and
        repeats the whole call, host selection included, at most
        ``max_retries`` times. Any other code raises.
        """
        accept_codes = set(accept_codes)
        for attempt in range(1, max_retries + 1):
            resp = self.execute(method, path, headers=headers, body=body)
            if 200 <= resp.code < 300 or resp.code in accept_codes:
                return resp
            if resp.code == SERVICE_OVERLOADED:
                self.logger.warning(
                    f"{method} {path} overloaded, attempt {attempt}/{max_retries}"
                )
                time.sleep(sleep_time_ms / 1000.0)
                continue
            raise error_for_status(
                resp.code,
                f"{method.lower()} request to {path} returned {resp.code}",
                path=path,
            )
        raise RetriesExhaustedError(
            f"{method.lower()} request to {path} timed out",
            attempts=max_retries,
            path=path,
        )
