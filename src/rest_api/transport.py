"""
Transports for rest_api.

The Api core only needs ``await transport.send(url, options)``. HttpxTransport
is the default implementation; CallableTransport adapts a plain coroutine
function.
"""
import logging
import os
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from .config import TimeoutConfig, normalize_timeout
from .errors import TransportError
from .types import ApiResponse, RequestOptions

logger = logging.getLogger(__name__)

SendFn = Callable[[str, RequestOptions], Awaitable[Any]]


def _is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def to_api_response(response: httpx.Response) -> ApiResponse:
    """Convert an httpx response into an ApiResponse."""
    return ApiResponse(
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers=dict(response.headers),
        content=response.content,
        url=str(response.url),
    )


class HttpxTransport:
    """Asynchronous transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Union[TimeoutConfig, float, None] = None,
    ):
        if client is not None:
            self._client = client
        else:
            timeout_config = normalize_timeout(timeout)
            # NODE_TLS_REJECT_UNAUTHORIZED=0 or SSL_CERT_VERIFY=0 disables SSL verification
            verify_ssl = not _is_ssl_verify_disabled_by_env()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    connect=timeout_config.connect,
                    read=timeout_config.read,
                    write=timeout_config.write,
                    pool=timeout_config.connect,
                ),
                follow_redirects=True,
                verify=verify_ssl,
            )
        self._closed = False

    async def send(self, url: str, options: RequestOptions) -> ApiResponse:
        """Send the request; network failures surface as TransportError."""
        if self._closed:
            raise RuntimeError("Transport has been closed")

        logger.debug(f"HttpxTransport.send: method={options.method}, url={url}")
        try:
            response = await self._client.request(
                method=options.method,
                url=url,
                headers=options.headers,
                content=options.body,
                **options.extra,
            )
        except httpx.HTTPError as e:
            logger.debug(f"HttpxTransport.send: {type(e).__name__} for {url}: {e}")
            raise TransportError(f"{type(e).__name__}: {e}", url=url) from e

        logger.debug(f"HttpxTransport.send: status={response.status_code} for {url}")
        return to_api_response(response)

    async def aclose(self) -> None:
        """Close the underlying client."""
        self._closed = True
        await self._client.aclose()


class CallableTransport:
    """Adapts ``async def send(url, options)`` to the transport interface."""

    def __init__(self, fn: SendFn):
        self._fn = fn

    async def send(self, url: str, options: RequestOptions) -> Any:
        return await self._fn(url, options)
