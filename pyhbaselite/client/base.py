import typing
from abc import ABC
from abc import abstractmethod


class SimpleTable(ABC):
    """
    Abstract table interface, mirroring the store's own table client so
    callers can switch between implementations.
    E.g., RemoteTable for talking to the REST gateway.
    """

    @abstractmethod
    def exists(self, get) -> bool:
        """Whether the row and columns selected by ``get`` have any cell."""

    @abstractmethod
    def exists_many(self, gets) -> typing.List[bool]:
        """``exists`` for several gets, in input order."""

    @abstractmethod
    def get(self, get):
        """Read one row; an empty Result when nothing matches."""

    @abstractmethod
    def get_many(self, gets):
        """Read several rows; results are aligned with ``gets``."""

    @abstractmethod
    def get_scanner(self, scan, qualifier=None):
        """
        Open a scanner for a Scan, or for a family (and qualifier)
        passed as bytes.
        """

    @abstractmethod
    def put(self, put) -> None:
        """Write the cells of one Put."""

    @abstractmethod
    def put_many(self, puts) -> None:
        """Write several Puts in one request."""

    @abstractmethod
    def check_and_put(self, row, family, qualifier, value, put) -> bool:
        """Apply ``put`` only when the column currently holds ``value``."""

    @abstractmethod
    def delete(self, delete) -> None:
        """Delete the cells described by one Delete."""

    @abstractmethod
    def delete_many(self, deletes) -> None:
        """Delete several rows."""

    @abstractmethod
    def check_and_delete(self, row, family, qualifier, value, delete) -> bool:
        """Apply ``delete`` only when the column currently holds ``value``."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying client."""


class SimpleAdmin(ABC):
    """Cluster level information exposed by the gateway."""

    @abstractmethod
    def get_rest_version(self) -> str:
        """Version of the REST gateway."""

    @abstractmethod
    def is_table_available(self, table_name) -> bool:
        """Whether the table exists."""

    @abstractmethod
    def get_table_list(self) -> typing.List[str]:
        """Names of all tables."""
