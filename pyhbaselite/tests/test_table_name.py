"""Tests for pyhbaselite.table_name"""

import threading

import pytest

from pyhbaselite.exceptions import PreconditionError
from pyhbaselite.table_name import META_TABLE_NAME
from pyhbaselite.table_name import TableName


class TestTableName:
    def test_default_namespace(self):
        name = TableName.value_of("users")
        assert name.namespace == "default"
        assert name.qualifier == "users"
        assert str(name) == "users"
        assert name.to_bytes() == b"users"

    def test_namespaced(self):
        name = TableName.value_of("ns1:events")
        assert name.namespace == "ns1"
        assert name.qualifier == "events"
        assert name.name == "ns1:events"
        assert TableName.value_of("ns1", "events") is name
        assert TableName.value_of(b"ns1:events") is name

    def test_default_prefix_resolves_to_plain_name(self):
        assert TableName.value_of("default:users") is TableName.value_of("users")

    def test_interned(self):
        assert TableName.value_of("interned_t") is TableName.value_of("interned_t")

    def test_interned_across_threads(self):
        names = []

        def lookup():
            names.append(TableName.value_of("threaded_t"))

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert all(name is names[0] for name in names)

    def test_meta(self):
        assert META_TABLE_NAME.is_meta_table()
        assert META_TABLE_NAME.is_system_table()
        assert not TableName.value_of("users").is_meta_table()

    def test_invalid(self):
        with pytest.raises(PreconditionError):
            TableName.value_of("bad name")
        with pytest.raises(PreconditionError):
            TableName.value_of("ns:-table")
        with pytest.raises(PreconditionError):
            TableName.value_of("zookeeper")
        with pytest.raises(PreconditionError):
            TableName.value_of("ns:")

    def test_passthrough(self):
        name = TableName.value_of("users")
        assert TableName.value_of(name) is name
        assert name == TableName.value_of("users")
        assert repr(name) == "TableName('users')"
