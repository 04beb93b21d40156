import pytest

from .helpers import TEST_TABLE
from .rest_mock_server import start_rest_mock_server
from ..client import get_admin
from ..client import get_client_info
from ..client import get_table


@pytest.fixture
def rest_server():
    data, server, port = start_rest_mock_server()
    data.create_table(TEST_TABLE)
    yield data, port
    server.shutdown()
    server.server_close()


@pytest.fixture
def rest_config(rest_server):
    _, port = rest_server
    return get_client_info(
        hosts=[f"127.0.0.1:{port}"],
        protocol="http",
        max_retries=3,
        sleep_time_ms=0,
        connection_timeout_ms=5000,
    )


@pytest.fixture
def mock_data(rest_server):
    return rest_server[0]


@pytest.fixture
def table(rest_config):
    remote_table = get_table(TEST_TABLE, rest_config)
    yield remote_table
    remote_table.close()


@pytest.fixture
def admin(rest_config):
    remote_admin = get_admin(rest_config)
    yield remote_admin
    remote_admin.close()
