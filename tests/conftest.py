"""
Shared fixtures for rest_api tests.
"""
from typing import List, Optional, Tuple

import pytest

from rest_api import Api
from rest_api.types import ApiResponse, RequestOptions


class MockTransport:
    """Transport returning a canned response and recording every call."""

    def __init__(
        self,
        status: int = 200,
        content: bytes = b'{"success": true}',
        headers: Optional[dict] = None,
    ) -> None:
        self.status = status
        self.content = content
        self.headers = headers or {"content-type": "application/json"}
        self.calls: List[Tuple[str, RequestOptions]] = []
        self.closed = False

    async def send(self, url: str, options: RequestOptions) -> ApiResponse:
        self.calls.append((url, options))
        return ApiResponse(
            status=self.status,
            headers=dict(self.headers),
            content=self.content,
            url=url,
        )

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_options(self) -> RequestOptions:
        return self.calls[-1][1]


class ErrorMockTransport:
    """Transport that raises the configured error."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def send(self, url: str, options: RequestOptions) -> ApiResponse:
        raise self.error


@pytest.fixture
def mock_transport():
    """Transport answering 200 OK."""
    return MockTransport()


@pytest.fixture
def api(mock_transport):
    """Api with only a root, wired to the mock transport."""
    return Api({"root": "api.example.com"}, transport=mock_transport)


@pytest.fixture
def bearer_api(mock_transport):
    """Api using the Bearer strategy."""
    return Api(
        {"root": "api.example.com", "authorization_strategy": "Bearer"},
        transport=mock_transport,
    )
