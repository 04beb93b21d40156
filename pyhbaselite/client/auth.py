# pylint: disable=import-outside-toplevel, logging-fstring-interpolation

"""
Authentication for gateway requests.

Kerberos logins acquire fresh GSSAPI credentials for every request and hand
them to an SPNEGO auth object; nothing is cached between calls. The Kerberos
stack (``gssapi``, ``requests-gssapi``) is the optional ``kerberos`` extra and
is only imported when a login is configured.
"""

import base64
import logging
import re
import typing
from abc import ABC
from abc import abstractmethod
from os import environ

from ..exceptions import AuthenticationError

JAAS_CONFIG_ENV = "HBASE_REST_JAAS_CONFIG"
MISSING_JAAS_HINT = (
    f"Missing JAAS Configuration, i.e. {JAAS_CONFIG_ENV}=/etc/config/client_jaas.conf"
)
KINIT_HINT = "UserPrincipal not specified.  Remember to kinit prior to execution."

logger = logging.getLogger(__name__)

_JAAS_ENTRY_RE = re.compile(r"([\w.\-]+)\s*\{(.*?)\}\s*;", re.DOTALL)
_JAAS_OPTION_RE = re.compile(r"([\w.\-]+)\s*=\s*(\"([^\"]*)\"|[^\s;]+)")


def _kerberos_modules():
    try:
        import gssapi
        import requests_gssapi
    except ImportError as err:
        raise AuthenticationError(
            "Kerberos authentication requires the 'kerberos' extra "
            "(gssapi and requests-gssapi)"
        ) from err
    return gssapi, requests_gssapi


def _acquire(principal: str = None, store: dict = None):
    gssapi, _ = _kerberos_modules()
    name = None
    if principal:
        name = gssapi.Name(principal, gssapi.NameType.kerberos_principal)
    try:
        if store:
            return gssapi.Credentials(name=name, usage="initiate", store=store)
        return gssapi.Credentials(name=name, usage="initiate")
    except gssapi.exceptions.GSSError as err:
        raise AuthenticationError(f"Kerberos login failed: {err}") from err


def spnego_auth(credentials):
    """SPNEGO ``requests`` auth bound to one set of credentials."""
    _, requests_gssapi = _kerberos_modules()
    return requests_gssapi.HTTPSPNEGOAuth(
        creds=credentials, mutual_authentication=requests_gssapi.OPTIONAL
    )


class Login(ABC):
    """A way of obtaining Kerberos credentials for one request."""

    hint = None

    @abstractmethod
    def acquire_credentials(self):
        """Return freshly acquired ``gssapi.Credentials``."""

    def login(self):
        """Credentials wrapped as a ``requests`` auth object for one request."""
        try:
            credentials = self.acquire_credentials()
        except AuthenticationError as err:
            if not self.hint:
                raise
            logger.error(self.hint)
            raise AuthenticationError(f"{err.message}. {self.hint}", host=err.host) from err
        return spnego_auth(credentials)


class KeytabLogin(Login):
    def __init__(self, principal: str, keytab: str):
        self.principal = principal
        self.keytab = keytab

    def acquire_credentials(self):
        return _acquire(self.principal, store={"client_keytab": self.keytab})

    def __repr__(self):
        return f"KeytabLogin(principal={self.principal!r}, keytab={self.keytab!r})"


class TicketCacheLogin(Login):
    """Credentials from an existing ``kinit``; the default cache unless ``ccache`` is set."""

    def __init__(self, principal: str = None, ccache: str = None):
        self.principal = principal
        self.ccache = ccache
        if principal is None:
            self.hint = KINIT_HINT

    def acquire_credentials(self):
        store = {"ccache": self.ccache} if self.ccache else None
        return _acquire(self.principal, store=store)

    def __repr__(self):
        return f"TicketCacheLogin(principal={self.principal!r})"


def parse_jaas_config(text: str) -> typing.Dict[str, typing.Dict[str, str]]:
    """
    Parses a JAAS login configuration into ``{entry: {option: value}}``.
    Only the first login module of each entry is kept.
    """
    text = re.sub(r"/\*.*?\*/", "", text, flags=re.DOTALL)
    text = re.sub(r"(?m)//.*$", "", text)
    entries = {}
    for name, body in _JAAS_ENTRY_RE.findall(text):
        module = body.split(";", 1)[0]
        options = {}
        for key, raw, quoted in _JAAS_OPTION_RE.findall(module):
            options[key] = quoted if raw.startswith('"') else raw
        entries[name] = options
    return entries


class JaasLogin(Login):
    """
    Login described by a named entry of an external JAAS configuration
    file, located by ``config_path`` or the ``HBASE_REST_JAAS_CONFIG``
    environment variable. The file is read on every login.
    """

    def __init__(self, entry_name: str, config_path: str = None):
        self.entry_name = entry_name
        self.config_path = config_path

    def _config_path(self) -> typing.Optional[str]:
        return self.config_path or environ.get(JAAS_CONFIG_ENV)

    @property
    def hint(self):
        path = self._config_path()
        if path is None:
            return MISSING_JAAS_HINT
        return f"Using JAAS Config file: {path}"

    def resolve(self) -> Login:
        path = self._config_path()
        if path is None:
            raise AuthenticationError("No JAAS configuration file")
        try:
            with open(path, "r") as config_file:
                entries = parse_jaas_config(config_file.read())
        except OSError as err:
            raise AuthenticationError(f"Cannot read JAAS configuration {path}: {err}") from err
        options = entries.get(self.entry_name)
        if options is None:
            raise AuthenticationError(
                f"No LoginModules configured for {self.entry_name} in {path}"
            )
        principal = options.get("principal")
        if options.get("useKeyTab", "false").lower() == "true":
            keytab = options.get("keyTab")
            if not keytab:
                raise AuthenticationError(
                    f"JAAS entry {self.entry_name} sets useKeyTab without keyTab"
                )
            return KeytabLogin(principal, keytab)
        return TicketCacheLogin(principal, ccache=options.get("ticketCache"))

    def acquire_credentials(self):
        return self.resolve().acquire_credentials()

    def __repr__(self):
        return f"JaasLogin(entry_name={self.entry_name!r})"


def get_login(config) -> typing.Optional[Login]:
    """
    The JAAS entry wins, then Kerberos with an explicit principal and keytab,
    then Kerberos from the ticket cache. ``None`` without Kerberos.
    """
    if config.JAAS_ENTRY_NAME:
        return JaasLogin(config.JAAS_ENTRY_NAME)
    if not config.USE_KERBEROS:
        return None
    if config.USER_PRINCIPAL and config.KEYTAB_LOCATION:
        return KeytabLogin(config.USER_PRINCIPAL, config.KEYTAB_LOCATION)
    return TicketCacheLogin(config.USER_PRINCIPAL)


def basic_auth_header(username: str, password: str) -> typing.Tuple[str, str]:
    """Preemptive ``Authorization`` header, sent without waiting for a challenge."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return "Authorization", f"Basic {token}"
