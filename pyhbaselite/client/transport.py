# pylint: disable=logging-fstring-interpolation

"""
HTTP execution of single requests. Failover and retries live in ``client.py``.
"""

import logging
import typing
from abc import ABC
from abc import abstractmethod
from collections import namedtuple

import requests
import urllib3

from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class Response(namedtuple("Response", ("code", "headers", "body"), defaults=({}, b""))):
    """Status code, headers and the fully read body of one response."""

    __slots__ = ()

    def header(self, name: str, default=None):
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default


class HttpTransport(ABC):
    """Sends one request to one absolute URI."""

    @abstractmethod
    def request(
        self,
        method: str,
        uri: str,
        headers: typing.Dict[str, str] = None,
        body: bytes = None,
        auth=None,
    ) -> Response:
        """Raises :class:`TransportError` when no response was received."""

    def close(self):
        """Releases pooled connections."""


class RequestsTransport(HttpTransport):
    """``requests.Session`` based transport with a per attempt timeout."""

    def __init__(self, timeout_ms: int = 1000, verify=True):
        self._session = requests.Session()
        self._session.verify = verify
        self._timeout = (timeout_ms / 1000.0, timeout_ms / 1000.0)

    @property
    def verify(self):
        return self._session.verify

    def request(self, method, uri, headers=None, body=None, auth=None) -> Response:
        try:
            resp = self._session.request(
                method,
                uri,
                headers=headers,
                data=body,
                auth=auth,
                timeout=self._timeout,
                allow_redirects=False,
            )
        except requests.RequestException as err:
            raise TransportError(f"{method} {uri} failed: {err}", host=uri) from err
        try:
            return Response(resp.status_code, dict(resp.headers), resp.content)
        finally:
            resp.close()

    def close(self):
        self._session.close()


def build_transport(config) -> HttpTransport:
    """
    Trusting self signed certificates only applies to ``https``; with
    ``http`` the setting is ignored.
    """
    verify = True
    if config.ALLOW_SELF_SIGNED_CERTIFICATES:
        if config.PROTOCOL.lower() == "https":
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            verify = False
        else:
            logger.warning(
                f"ignoring self signed certificate trust for protocol {config.PROTOCOL}"
            )
    return RequestsTransport(timeout_ms=config.CONNECTION_TIMEOUT_MS, verify=verify)
