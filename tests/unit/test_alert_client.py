"""Unit tests for the User Directory HTTP client."""

from __future__ import annotations

import typing as typ

import httpx
import pytest

from stockwatch.alerts import (
    AlertDirectoryConfig,
    AlertedUser,
    AlertQuery,
    AlertQueryClient,
    DirectoryProtocolError,
    DirectoryUnavailable,
    HttpAlertQueryClient,
    parse_alerted_users,
)
from stockwatch.dispatch import DispatchCoordinator, DispatchStatus
from stockwatch.intake.events import ProductAvailableEvent
from tests.helpers.fakes import AVAILABLE_ON, RecordingNotifier, fixed_today

_TEMPLATE = "https://users.test/alerts?productId={productId}&date={availableOnDate}"


def _make_client(
    handler: typ.Callable[[httpx.Request], httpx.Response],
) -> tuple[HttpAlertQueryClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
    client = HttpAlertQueryClient(
        AlertDirectoryConfig(endpoint_template=_TEMPLATE, timeout_s=2.0),
        http_client=http_client,
    )
    return client, requests


def _query() -> AlertQuery:
    return AlertQuery(product_id=42, available_on=AVAILABLE_ON)


class TestResolve:
    """Tests for ``HttpAlertQueryClient.resolve``."""

    @pytest.mark.asyncio
    async def test_returns_users_in_directory_order(self) -> None:
        """Users are decoded in response order with contact details kept."""
        client, requests = _make_client(
            lambda _request: httpx.Response(
                200,
                json=[
                    {"id": 1, "fullName": "Alice", "email": "alice@example.com"},
                    {"id": 2, "fullName": "Bob", "phoneNumber": "+34600000000"},
                ],
            )
        )

        users = await client.resolve(_query())

        assert users == (
            AlertedUser(
                user_id=1, full_name="Alice", contact={"email": "alice@example.com"}
            ),
            AlertedUser(
                user_id=2, full_name="Bob", contact={"phoneNumber": "+34600000000"}
            ),
        )
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == (
            "https://users.test/alerts?productId=42&date=2024-05-01"
        )

    @pytest.mark.asyncio
    async def test_empty_array_is_not_an_error(self) -> None:
        """An empty JSON array resolves to no users."""
        client, _ = _make_client(lambda _request: httpx.Response(200, json=[]))

        assert await client.resolve(_query()) == ()

    @pytest.mark.asyncio
    async def test_no_content_resolves_to_no_users(self) -> None:
        """A 204 response resolves to no users."""
        client, _ = _make_client(lambda _request: httpx.Response(204))

        assert await client.resolve(_query()) == ()

    @pytest.mark.parametrize("status_code", [302, 307, 404, 503])
    @pytest.mark.asyncio
    async def test_non_success_status_is_unavailable(self, status_code: int) -> None:
        """Redirects and error statuses surface as DirectoryUnavailable."""
        client, _ = _make_client(lambda _request: httpx.Response(status_code))

        with pytest.raises(DirectoryUnavailable) as exc_info:
            await client.resolve(_query())

        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_empty_ok_body_is_protocol_error(self) -> None:
        """A 200 with no body is a failed lookup, never "no users"."""
        client, _ = _make_client(lambda _request: httpx.Response(200))

        with pytest.raises(DirectoryProtocolError, match="empty"):
            await client.resolve(_query())

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self) -> None:
        """Timeouts surface as DirectoryUnavailable."""

        def _timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = _make_client(_timeout)

        with pytest.raises(DirectoryUnavailable, match="timed out"):
            await client.resolve(_query())

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self) -> None:
        """Connection failures surface as DirectoryUnavailable."""

        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _make_client(_refuse)

        with pytest.raises(DirectoryUnavailable, match="connection refused"):
            await client.resolve(_query())

    @pytest.mark.asyncio
    async def test_invalid_json_is_protocol_error(self) -> None:
        """Unparseable bodies surface as DirectoryProtocolError."""
        client, _ = _make_client(
            lambda _request: httpx.Response(200, content=b"<html>oops</html>")
        )

        with pytest.raises(DirectoryProtocolError, match="oops"):
            await client.resolve(_query())

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self) -> None:
        """aclose leaves a caller-owned http client open."""
        client, _ = _make_client(lambda _request: httpx.Response(200, json=[]))

        await client.aclose()

        assert await client.resolve(_query()) == ()

    def test_satisfies_protocol(self) -> None:
        """The HTTP client implements the AlertQueryClient protocol."""
        client, _ = _make_client(lambda _request: httpx.Response(200, json=[]))
        assert isinstance(client, AlertQueryClient)


class TestParseAlertedUsers:
    """Tests for response body parsing."""

    def test_user_id_key_is_accepted(self) -> None:
        """``userId`` works in place of ``id``."""
        users = parse_alerted_users(b'[{"userId": "u-7", "fullName": "Carol"}]')
        assert users == (AlertedUser(user_id="u-7", full_name="Carol"),)

    @pytest.mark.parametrize("body", [b"", b"  \n"])
    def test_blank_body_is_rejected(self, body: bytes) -> None:
        """A blank body is not an empty user list."""
        with pytest.raises(DirectoryProtocolError, match="empty"):
            parse_alerted_users(body)

    @pytest.mark.parametrize(
        ("body", "fragment"),
        [
            (b'{"users": []}', "JSON array"),
            (b'[{"fullName": "Alice"}]', "record 0"),
            (b'[{"id": 1, "fullName": "Alice"}, {"id": 2}]', "record 1"),
            (b'[{"id": true, "fullName": "Alice"}]', "missing user id"),
            (b"[42]", "expected object"),
        ],
        ids=["object-body", "missing-id", "missing-name", "bool-id", "scalar-record"],
    )
    def test_invalid_records_fail_whole_response(
        self, body: bytes, fragment: str
    ) -> None:
        """A bad record is never skipped silently."""
        with pytest.raises(DirectoryProtocolError, match=fragment):
            parse_alerted_users(body)


@pytest.mark.parametrize(
    "response",
    [httpx.Response(200), httpx.Response(302), httpx.Response(307)],
    ids=["empty-200", "redirect-302", "redirect-307"],
)
@pytest.mark.asyncio
async def test_empty_or_redirected_lookup_fails_the_query(
    response: httpx.Response,
) -> None:
    """Unusable directory answers end as query failures, not as no users."""
    client, _ = _make_client(lambda _request: response)
    notifier = RecordingNotifier()
    coordinator = DispatchCoordinator(client, notifier, today=fixed_today)

    outcome = await coordinator.dispatch(
        ProductAvailableEvent(product_id=42, available_on=AVAILABLE_ON)
    )

    assert outcome.status is DispatchStatus.QUERY_FAILED
    assert outcome.query_error is not None
    assert notifier.attempts == []
