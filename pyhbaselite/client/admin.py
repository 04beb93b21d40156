import typing
from urllib.parse import quote

from .base import SimpleAdmin
from .client import Client
from .codec import JsonCodec
from .codec import WireCodec
from ..exceptions import EndpointNotFoundError
from ..table_name import TableName


def build_path(access_token: typing.Optional[str], *segments: str) -> str:
    """``/[access_token/]segment/...``"""
    parts = [access_token] if access_token else []
    parts.extend(segments)
    return "/" + "/".join(parts)


class RemoteAdmin(SimpleAdmin):
    def __init__(
        self,
        client: Client,
        codec: WireCodec = None,
        max_retries: int = 10,
        sleep_time_ms: int = 1000,
        access_token: str = None,
    ):
        self._client = client
        self._codec = codec or JsonCodec()
        self._max_retries = max_retries
        self._sleep_time_ms = sleep_time_ms
        self._access_token = access_token

    @property
    def client(self) -> Client:
        return self._client

    def _get(self, path: str):
        return self._client.request_with_retry(
            "GET",
            path,
            self._max_retries,
            self._sleep_time_ms,
            headers={"Accept": self._codec.MIME_TYPE},
        )

    def get_rest_version(self) -> str:
        path = build_path(self._access_token, "version", "rest")
        resp = self._get(path)
        if resp.code == 404:
            raise EndpointNotFoundError("REST version not found", path=path)
        return self._codec.decode_version(resp.body).rest

    def is_table_available(self, table_name) -> bool:
        name = str(TableName.value_of(table_name))
        path = build_path(self._access_token, quote(name, safe=":"), "exists")
        return self._get(path).code != 404

    def get_table_list(self) -> typing.List[str]:
        path = build_path(self._access_token)
        resp = self._get(path)
        if resp.code == 404:
            raise EndpointNotFoundError("Table list not found", path=path)
        return list(self._codec.decode_table_list(resp.body).tables)

    def close(self) -> None:
        self._client.shutdown()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
