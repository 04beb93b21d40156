import re
import threading

from . import constants
from .exceptions import PreconditionError

_NAMESPACE_RE = re.compile(r"^[a-zA-Z_0-9]+$")
_QUALIFIER_RE = re.compile(r"^[a-zA-Z_0-9][a-zA-Z_0-9_.\-]*$")
_RESERVED = {"zookeeper", "-ROOT-", ".META."}

_cache_lock = threading.Lock()
_cache = {}


class TableName:
    """
    Namespace qualified table name. Instances are interned: equal names
    resolve to the same object for the life of the process.
    """

    __slots__ = ("_namespace", "_qualifier", "_name")

    def __init__(self, namespace: str, qualifier: str):
        self._namespace = namespace
        self._qualifier = qualifier
        if namespace == constants.DEFAULT_NAMESPACE_NAME:
            self._name = qualifier
        else:
            self._name = f"{namespace}{constants.NAMESPACE_DELIMITER}{qualifier}"

    @classmethod
    def value_of(cls, name, qualifier=None) -> "TableName":
        """
        ``value_of("ns:table")``, ``value_of("table")`` or
        ``value_of("ns", "table")``.
        """
        if isinstance(name, TableName):
            return name
        if isinstance(name, bytes):
            name = name.decode("utf-8")
        if qualifier is None:
            namespace, sep, qualifier = name.partition(constants.NAMESPACE_DELIMITER)
            if not sep:
                namespace, qualifier = constants.DEFAULT_NAMESPACE_NAME, name
        else:
            namespace = name
            if isinstance(qualifier, bytes):
                qualifier = qualifier.decode("utf-8")
        if not namespace:
            namespace = constants.DEFAULT_NAMESPACE_NAME

        key = (namespace, qualifier)
        with _cache_lock:
            table_name = _cache.get(key)
            if table_name is None:
                _validate(namespace, qualifier)
                table_name = cls(namespace, qualifier)
                _cache[key] = table_name
        return table_name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def qualifier(self) -> str:
        return self._qualifier

    @property
    def name(self) -> str:
        return self._name

    def to_bytes(self) -> bytes:
        return self._name.encode("utf-8")

    def is_system_table(self) -> bool:
        return self._namespace == constants.SYSTEM_NAMESPACE_NAME

    def is_meta_table(self) -> bool:
        return self._name == constants.META_TABLE_NAME

    def __eq__(self, other):
        if not isinstance(other, TableName):
            return NotImplemented
        return self._name == other._name

    def __hash__(self):
        return hash(self._name)

    def __str__(self):
        return self._name

    def __repr__(self):
        return f"TableName({self._name!r})"


def _validate(namespace: str, qualifier: str):
    if not qualifier:
        raise PreconditionError("Table qualifier must not be empty")
    if qualifier in _RESERVED:
        raise PreconditionError(f"{qualifier} is a reserved table name")
    if not _NAMESPACE_RE.match(namespace):
        raise PreconditionError(
            f"Illegal character in namespace {namespace!r}; "
            "only alphanumeric characters and '_' are allowed"
        )
    if not _QUALIFIER_RE.match(qualifier):
        raise PreconditionError(
            f"Illegal table qualifier {qualifier!r}; only alphanumeric "
            "characters, '_', '-' and '.' are allowed and it cannot start "
            "with '.' or '-'"
        )


META_TABLE_NAME = TableName.value_of(constants.META_TABLE_NAME)
