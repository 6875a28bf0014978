"""
Tests for transport.py
Logic testing: Decision/Branch, Error Path, Integration
"""
import json

import httpx
import pytest
import respx
from httpx import Response

from rest_api import Api
from rest_api.config import TimeoutConfig
from rest_api.errors import TransportError, UnsuccessfulResponseError
from rest_api.transport import (
    CallableTransport,
    HttpxTransport,
    _is_ssl_verify_disabled_by_env,
    to_api_response,
)
from rest_api.types import ApiResponse, RequestOptions


def _mock_client(router: respx.MockRouter) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))


class TestSslEnv:
    """Tests for _is_ssl_verify_disabled_by_env."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv("NODE_TLS_REJECT_UNAUTHORIZED", raising=False)
        monkeypatch.delenv("SSL_CERT_VERIFY", raising=False)

        assert _is_ssl_verify_disabled_by_env() is False

    @pytest.mark.parametrize("name", ["NODE_TLS_REJECT_UNAUTHORIZED", "SSL_CERT_VERIFY"])
    def test_disabled(self, monkeypatch, name):
        monkeypatch.delenv("NODE_TLS_REJECT_UNAUTHORIZED", raising=False)
        monkeypatch.delenv("SSL_CERT_VERIFY", raising=False)
        monkeypatch.setenv(name, "0")

        assert _is_ssl_verify_disabled_by_env() is True

    # Boundary: only "0" disables
    def test_other_value(self, monkeypatch):
        monkeypatch.delenv("SSL_CERT_VERIFY", raising=False)
        monkeypatch.setenv("NODE_TLS_REJECT_UNAUTHORIZED", "1")

        assert _is_ssl_verify_disabled_by_env() is False


class TestToApiResponse:
    """Tests for to_api_response."""

    def test_conversion(self):
        request = httpx.Request("GET", "https://api.example.com/todos")
        response = httpx.Response(
            404,
            json={"error": "missing"},
            headers={"X-Trace": "t1"},
            request=request,
        )

        result = to_api_response(response)

        assert result.status == 404
        assert result.status_text == "Not Found"
        assert result.headers["x-trace"] == "t1"
        assert result.json() == {"error": "missing"}
        assert result.url == "https://api.example.com/todos"
        assert result.ok is False


class TestHttpxTransport:
    """Tests for HttpxTransport.send."""

    @pytest.mark.asyncio
    async def test_send(self):
        router = respx.MockRouter()
        route = router.post("https://api.example.com/todos").mock(
            return_value=Response(201, json={"id": 1})
        )
        transport = HttpxTransport(client=_mock_client(router))

        response = await transport.send(
            "https://api.example.com/todos",
            RequestOptions(
                method="POST",
                headers={"Content-Type": "application/json"},
                body='{"name": "foobar"}',
            ),
        )

        assert route.called
        request = route.calls.last.request
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"name": "foobar"}
        assert response.status == 201
        assert response.json() == {"id": 1}

    # Path: extra options forwarded to httpx
    @pytest.mark.asyncio
    async def test_extra_forwarded(self):
        router = respx.MockRouter()
        route = router.get("https://api.example.com/todos").mock(return_value=Response(200))
        transport = HttpxTransport(client=_mock_client(router))

        await transport.send(
            "https://api.example.com/todos",
            RequestOptions(extra={"params": {"page": "2"}}),
        )

        assert route.calls.last.request.url.params["page"] == "2"

    # Error Path: network failure becomes TransportError
    @pytest.mark.asyncio
    async def test_connect_error(self):
        router = respx.MockRouter()
        router.get("https://api.example.com/todos").mock(side_effect=httpx.ConnectError)
        transport = HttpxTransport(client=_mock_client(router))

        with pytest.raises(TransportError) as exc_info:
            await transport.send("https://api.example.com/todos", RequestOptions())

        assert exc_info.value.url == "https://api.example.com/todos"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert "ConnectError" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_closed(self):
        transport = HttpxTransport(client=_mock_client(respx.MockRouter()))

        await transport.aclose()

        with pytest.raises(RuntimeError, match="closed"):
            await transport.send("https://api.example.com/todos", RequestOptions())

    # Decision: timeout config applied to the owned client
    @pytest.mark.asyncio
    async def test_owned_client_timeout(self):
        transport = HttpxTransport(timeout=TimeoutConfig(connect=1.0, read=2.0, write=3.0))

        timeout = transport._client.timeout
        assert timeout.connect == 1.0
        assert timeout.read == 2.0
        assert timeout.write == 3.0

        await transport.aclose()

    # Path: owned client follows redirects to the final response
    @pytest.mark.asyncio
    async def test_owned_client_follows_redirects(self):
        with respx.mock() as router:
            router.get("https://api.example.com/old").mock(
                return_value=Response(302, headers={"Location": "https://api.example.com/new"})
            )
            new_route = router.get("https://api.example.com/new").mock(
                return_value=Response(200, json={"moved": True})
            )

            async with Api({"root": "api.example.com"}, transport=HttpxTransport()) as api:
                response = await api.get("old")

        assert new_route.called
        assert response.status == 200
        assert response.json() == {"moved": True}
        assert response.url == "https://api.example.com/new"


class TestCallableTransport:
    """Tests for CallableTransport."""

    @pytest.mark.asyncio
    async def test_delegates(self):
        async def send(url, options):
            return ApiResponse(status=200, url=url)

        transport = CallableTransport(send)
        response = await transport.send("https://api.example.com/x", RequestOptions())

        assert response.url == "https://api.example.com/x"


class TestApiOverHttpx:
    """Integration: Api -> merge -> auth -> HttpxTransport -> wire."""

    @pytest.mark.asyncio
    async def test_bearer_on_wire(self):
        router = respx.MockRouter()
        route = router.get("https://api.example.com/v1/todos").mock(
            return_value=Response(200, json=[{"id": 1}])
        )
        transport = HttpxTransport(client=_mock_client(router))

        async with Api(
            {"root": "api.example.com", "version": "v1", "authorization_strategy": "Bearer"},
            transport=transport,
        ) as api:
            api.authorize(token="my-secret-token")
            response = await api.get("todos")

        assert response.json() == [{"id": 1}]
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer my-secret-token"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_error_status_on_wire(self):
        router = respx.MockRouter()
        router.get("https://api.example.com/todos").mock(
            return_value=Response(401, json={"error": "unauthorized"})
        )
        api = Api({"root": "api.example.com"}, transport=HttpxTransport(client=_mock_client(router)))
        seen = []
        api.on(401, lambda response: seen.append(response.status))

        with pytest.raises(UnsuccessfulResponseError) as exc_info:
            await api.get("todos")

        assert seen == [401]
        assert exc_info.value.response.json() == {"error": "unauthorized"}
        await api.close()
