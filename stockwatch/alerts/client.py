"""HTTP client for resolving alerted users from the User Directory."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from stockwatch.alerts.errors import DirectoryProtocolError, DirectoryUnavailable
from stockwatch.alerts.models import AlertedUser

if typ.TYPE_CHECKING:
    from stockwatch.alerts.config import AlertDirectoryConfig
    from stockwatch.alerts.models import AlertQuery, UserId

_HTTP_NO_CONTENT = 204
_ID_KEYS = ("id", "userId")
_NAME_KEY = "fullName"


@typ.runtime_checkable
class AlertQueryClient(typ.Protocol):
    """Interface for looking up users alerting on a product and date."""

    async def resolve(self, query: AlertQuery) -> tuple[AlertedUser, ...]:
        """Return matching users in directory order.

        An empty tuple means nobody is waiting for the product; it is not an
        error.

        Raises
        ------
        DirectoryUnavailable
            If the directory cannot be reached, times out, or answers with
            an HTTP error status.
        DirectoryProtocolError
            If the response body cannot be parsed into user records.

        """
        ...


def _extract_user_id(record: dict[str, object], index: int) -> UserId:
    for key in _ID_KEYS:
        value = record.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, int | str):
            return value
    raise DirectoryProtocolError.invalid_record(index, "missing user id")


def _to_alerted_user(record: object, index: int) -> AlertedUser:
    if not isinstance(record, dict):
        raise DirectoryProtocolError.invalid_record(
            index, f"expected object, got {type(record).__name__}"
        )
    record_dict = typ.cast("dict[str, object]", record)
    user_id = _extract_user_id(record_dict, index)
    full_name = record_dict.get(_NAME_KEY)
    if not isinstance(full_name, str):
        raise DirectoryProtocolError.invalid_record(index, f"missing {_NAME_KEY}")
    contact = {
        key: value
        for key, value in record_dict.items()
        if key not in _ID_KEYS and key != _NAME_KEY
    }
    return AlertedUser(user_id=user_id, full_name=full_name, contact=contact)


def parse_alerted_users(body: bytes) -> tuple[AlertedUser, ...]:
    """Decode a User Directory response body into alerted users.

    Every record must carry an ``id`` (or ``userId``) and a ``fullName``;
    one bad record fails the whole response rather than being skipped.

    Raises
    ------
    DirectoryProtocolError
        If the body is empty or not a JSON array of valid user records.

    """
    if not body.strip():
        raise DirectoryProtocolError.empty_body()
    try:
        data = msgspec.json.decode(body)
    except msgspec.DecodeError as exc:
        raise DirectoryProtocolError.invalid_json(
            body.decode("utf-8", errors="replace")
        ) from exc
    if not isinstance(data, list):
        raise DirectoryProtocolError.not_a_list(type(data).__name__)
    return tuple(_to_alerted_user(record, index) for index, record in enumerate(data))


class HttpAlertQueryClient:
    """Resolve alerted users over HTTP.

    One instance is meant to live for the whole process and be shared by
    every dispatch, so connections are pooled by the underlying client.

    Parameters
    ----------
    config
        Endpoint template and timeout.
    http_client
        Optional ``httpx.AsyncClient`` (tests inject one backed by
        ``httpx.MockTransport``). When omitted the instance creates and owns
        its own client.

    """

    def __init__(
        self,
        config: AlertDirectoryConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            headers={"Accept": "application/json"},
        )

    @property
    def config(self) -> AlertDirectoryConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def resolve(self, query: AlertQuery) -> tuple[AlertedUser, ...]:
        """Fetch users alerting on ``query.product_id`` for its date."""
        url = self._config.render_url(
            query.product_id, query.available_on.isoformat()
        )
        response = await self._send_request(url)
        # redirects are not followed, so a 3xx is a failed lookup too
        if not response.is_success:
            raise DirectoryUnavailable.http_error(response.status_code)
        if response.status_code == _HTTP_NO_CONTENT:
            return ()
        return parse_alerted_users(response.content)

    async def _send_request(self, url: str) -> httpx.Response:
        try:
            return await self._client.get(url, timeout=self._config.timeout_s)
        except httpx.TimeoutException as exc:
            raise DirectoryUnavailable.timeout() from exc
        except httpx.RequestError as exc:
            raise DirectoryUnavailable.network_error(str(exc)) from exc
