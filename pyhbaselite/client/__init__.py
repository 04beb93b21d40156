"""
Client for the REST gateway of the store.

Configuration is a plain namedtuple; `get_client_info` fills it from the
environment. `get_table` and `get_admin` build ready to use objects that
share the transport behaviour described in `client.py`:
failover across hosts, bounded retries on 509 and optional Kerberos.

Please see `base.py` for the table and admin interfaces.
"""

import typing
from os import environ
from collections import namedtuple

from .base import SimpleAdmin
from .base import SimpleTable
from ..exceptions import PreconditionError

DEFAULT_PROTOCOL = "http"
DEFAULT_MAX_RETRIES = 10
DEFAULT_SLEEP_TIME_MS = 1000
DEFAULT_CONNECTION_TIMEOUT_MS = 1000


def _env_hosts() -> typing.Tuple[str, ...]:
    return tuple(h.strip() for h in environ.get("HBASE_REST_HOSTS", "").split(",") if h.strip())


def _env_flag(name: str) -> bool:
    return environ.get(name, "").lower() in ("1", "true", "yes")


_restconfig_fields = (
    "PROTOCOL",
    "HOSTS",
    "MAX_RETRIES",
    "SLEEP_TIME_MS",
    "CONNECTION_TIMEOUT_MS",
    "USE_KERBEROS",
    "USER_PRINCIPAL",
    "KEYTAB_LOCATION",
    "JAAS_ENTRY_NAME",
    "ALLOW_SELF_SIGNED_CERTIFICATES",
    "EXTRA_HEADERS",
    "ACCESS_TOKEN",
)
_restconfig_defaults = (
    environ.get("HBASE_REST_PROTOCOL", DEFAULT_PROTOCOL),
    _env_hosts(),
    DEFAULT_MAX_RETRIES,
    DEFAULT_SLEEP_TIME_MS,
    DEFAULT_CONNECTION_TIMEOUT_MS,
    _env_flag("HBASE_REST_USE_KERBEROS"),
    environ.get("HBASE_REST_USER_PRINCIPAL"),
    environ.get("HBASE_REST_KEYTAB_LOCATION"),
    environ.get("HBASE_REST_JAAS_ENTRY_NAME"),
    False,
    {},
    environ.get("HBASE_REST_ACCESS_TOKEN"),
)
RestConfig = namedtuple("RestConfig", _restconfig_fields, defaults=_restconfig_defaults)


def get_client_info(
    hosts: typing.Iterable[str] = None,
    protocol: str = None,
    max_retries: int = None,
    sleep_time_ms: int = None,
    connection_timeout_ms: int = None,
    use_kerberos: bool = None,
    user_principal: str = None,
    keytab_location: str = None,
    jaas_entry_name: str = None,
    allow_self_signed_certificates: bool = False,
    extra_headers: typing.Dict[str, str] = None,
    access_token: str = None,
    username: str = None,
    password: str = None,
) -> RestConfig:
    """Helper function to load config from env; arguments override it."""
    _hosts = _env_hosts()
    if hosts:
        _hosts = tuple(hosts)

    _protocol = environ.get("HBASE_REST_PROTOCOL", DEFAULT_PROTOCOL)
    if protocol:
        _protocol = protocol

    _use_kerberos = _env_flag("HBASE_REST_USE_KERBEROS")
    if use_kerberos is not None:
        _use_kerberos = use_kerberos

    _extra_headers = dict(extra_headers or {})
    if username is not None:
        from .auth import basic_auth_header

        name, value = basic_auth_header(username, password or "")
        _extra_headers[name] = value

    kwargs = {
        "PROTOCOL": _protocol,
        "HOSTS": _hosts,
        "MAX_RETRIES": DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
        "SLEEP_TIME_MS": DEFAULT_SLEEP_TIME_MS if sleep_time_ms is None else sleep_time_ms,
        "CONNECTION_TIMEOUT_MS": DEFAULT_CONNECTION_TIMEOUT_MS
        if connection_timeout_ms is None
        else connection_timeout_ms,
        "USE_KERBEROS": _use_kerberos,
        "USER_PRINCIPAL": user_principal or environ.get("HBASE_REST_USER_PRINCIPAL"),
        "KEYTAB_LOCATION": keytab_location or environ.get("HBASE_REST_KEYTAB_LOCATION"),
        "JAAS_ENTRY_NAME": jaas_entry_name or environ.get("HBASE_REST_JAAS_ENTRY_NAME"),
        "ALLOW_SELF_SIGNED_CERTIFICATES": allow_self_signed_certificates,
        "EXTRA_HEADERS": _extra_headers,
        "ACCESS_TOKEN": access_token or environ.get("HBASE_REST_ACCESS_TOKEN"),
    }
    return RestConfig(**kwargs)


def validate_config(config: RestConfig) -> None:
    """Configuration errors surface before any request is made."""
    if config.PROTOCOL.lower() not in ("http", "https"):
        raise PreconditionError(f"Unsupported protocol {config.PROTOCOL}")
    if not config.HOSTS:
        raise PreconditionError("At least one host is required")
    if config.MAX_RETRIES <= 0:
        raise PreconditionError("max retries must be positive")
    if config.SLEEP_TIME_MS < 0 or config.CONNECTION_TIMEOUT_MS <= 0:
        raise PreconditionError("sleep time and connection timeout must not be negative")


def build_client(config: RestConfig, transport=None):
    from .auth import get_login
    from .client import Client
    from .cluster import Cluster
    from .transport import build_transport

    validate_config(config)
    if transport is None:
        transport = build_transport(config)
    return Client(
        Cluster(config.HOSTS),
        protocol=config.PROTOCOL,
        transport=transport,
        login=get_login(config),
        extra_headers=config.EXTRA_HEADERS,
    )


def get_table(table_name, config: RestConfig = None, transport=None) -> SimpleTable:
    from .table import RemoteTable

    config = config or get_client_info()
    return RemoteTable(
        build_client(config, transport=transport),
        table_name,
        max_retries=config.MAX_RETRIES,
        sleep_time_ms=config.SLEEP_TIME_MS,
        access_token=config.ACCESS_TOKEN,
    )


def get_admin(config: RestConfig = None, transport=None) -> SimpleAdmin:
    from .admin import RemoteAdmin

    config = config or get_client_info()
    return RemoteAdmin(
        build_client(config, transport=transport),
        max_retries=config.MAX_RETRIES,
        sleep_time_ms=config.SLEEP_TIME_MS,
        access_token=config.ACCESS_TOKEN,
    )
