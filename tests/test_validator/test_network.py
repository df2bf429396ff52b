"""Tests for preflight.validator.network -- endpoint probes with mocked transport."""

from __future__ import annotations

import asyncio
import socket

import httpx
import pytest

from preflight.validator.network import (
    NetworkEndpoint,
    check_endpoint,
    check_endpoints,
    validate_network_connectivity,
)

RPC_URL = "https://soroban-testnet.stellar.org/"


class TestReachable:
    @pytest.mark.asyncio
    async def test_ok_response(self, httpx_mock) -> None:
        httpx_mock.add_response(url=RPC_URL, method="HEAD", status_code=200)
        assert await check_endpoint(RPC_URL) is None

    @pytest.mark.asyncio
    async def test_server_error_still_reachable(self, httpx_mock) -> None:
        httpx_mock.add_response(url=RPC_URL, method="HEAD", status_code=503)
        assert await check_endpoint(RPC_URL) is None

    @pytest.mark.asyncio
    async def test_sends_user_agent(self, httpx_mock) -> None:
        httpx_mock.add_response(url=RPC_URL, method="HEAD")
        await check_endpoint(RPC_URL)
        request = httpx_mock.get_request()
        assert request.headers["User-Agent"] == "StellarSuite-PreFlight/1.0"


class TestInvalidUrl:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["not a url", "ftp://example.com/", ""])
    async def test_invalid(self, url: str) -> None:
        issue = await check_endpoint(url)
        assert issue is not None
        assert issue.code == "INVALID_URL"
        assert issue.received_value == url


class TestClassification:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (httpx.ConnectTimeout("timed out"), "NETWORK_TIMEOUT"),
            (httpx.ConnectError("[Errno 111] Connection refused"), "CONNECTION_REFUSED"),
            (httpx.ConnectError("[Errno -2] Name or service not known"), "DNS_RESOLUTION_FAILED"),
            (httpx.ReadError("[Errno 104] Connection reset by peer"), "CONNECTION_RESET"),
            (
                httpx.ConnectError("[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed"),
                "TLS_ERROR",
            ),
            (httpx.ConnectError("something odd"), "NETWORK_ERROR"),
            (httpx.ConnectError("proxy error via sslproxy.example.org"), "NETWORK_ERROR"),
        ],
    )
    async def test_codes(self, httpx_mock, exc: Exception, code: str) -> None:
        httpx_mock.add_exception(exc, url=RPC_URL)
        issue = await check_endpoint(RPC_URL)
        assert issue is not None
        assert issue.code == code
        assert issue.field == "url"
        assert issue.suggestion

    @pytest.mark.asyncio
    async def test_timeout_message(self, httpx_mock) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=RPC_URL)
        issue = await check_endpoint(RPC_URL, timeout_ms=1500, label="Stellar RPC")
        assert issue is not None
        assert issue.message == 'Connection to "Stellar RPC" timed out after 1500ms.'

    @pytest.mark.asyncio
    async def test_failure_message_carries_reason(self, httpx_mock) -> None:
        httpx_mock.add_exception(httpx.ConnectError("something odd"), url=RPC_URL)
        issue = await check_endpoint(RPC_URL)
        assert issue is not None
        assert issue.message == f'Failed to connect to "{RPC_URL}": something odd'

    @pytest.mark.asyncio
    async def test_hard_deadline(self, httpx_mock) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(2)
            return httpx.Response(200)

        httpx_mock.add_callback(slow, url=RPC_URL)
        issue = await check_endpoint(RPC_URL, timeout_ms=50)
        assert issue is not None
        assert issue.code == "NETWORK_TIMEOUT"


@pytest.mark.asyncio
async def test_real_connection_refused() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    url = f"http://127.0.0.1:{port}/"

    async with httpx.AsyncClient(trust_env=False) as client:
        issue = await check_endpoint(url, timeout_ms=2000, client=client)
    assert issue is not None
    assert issue.code == "CONNECTION_REFUSED"


class TestMultipleEndpoints:
    @pytest.mark.asyncio
    async def test_only_failures_reported(self, httpx_mock) -> None:
        httpx_mock.add_response(url=RPC_URL, method="HEAD")
        httpx_mock.add_exception(
            httpx.ConnectError("[Errno 111] Connection refused"), url="http://localhost:8000/"
        )
        result = await check_endpoints([
            NetworkEndpoint(url=RPC_URL, label="Stellar RPC"),
            NetworkEndpoint(url="http://localhost:8000/", label="Local RPC"),
        ])
        assert not result.valid
        assert [i.code for i in result.issues] == ["CONNECTION_REFUSED"]
        assert "Local RPC" in result.issues[0].message

    @pytest.mark.asyncio
    async def test_empty_list(self) -> None:
        result = await check_endpoints([])
        assert result.valid
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_single_endpoint_result(self, httpx_mock) -> None:
        httpx_mock.add_response(url=RPC_URL, method="HEAD")
        result = await validate_network_connectivity(NetworkEndpoint(url=RPC_URL))
        assert result.valid
