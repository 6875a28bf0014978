"""
Type definitions for rest_api.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Optional,
    Protocol,
    Union,
)


class AuthorizationStrategy(str, Enum):
    """How credentials are attached to outgoing requests."""

    NONE = "None"
    BASIC = "Basic"
    BEARER = "Bearer"
    CUSTOM = "Custom"


# Request payload as handed to the transport
RequestBody = Union[str, bytes]


@dataclass
class RequestOptions:
    """Options for a single call, built fresh by the option merger."""

    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[RequestBody] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    """Additional keyword arguments forwarded to the transport (params, timeout, ...)"""


@dataclass
class ApiResponse:
    """Response returned by the bundled transport."""

    status: int
    status_text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self, serializer: Optional["Serializer"] = None) -> Any:
        """Decode the body as JSON, or with the given serializer."""
        if serializer is not None:
            return serializer.deserialize(self.text)
        return json.loads(self.text)


class Serializer(Protocol):
    """Serializer protocol for request bodies."""

    def serialize(self, data: Any) -> str:
        """Serialize data to string."""
        ...

    def deserialize(self, text: str) -> Any:
        """Deserialize string to data."""
        ...


class Transport(Protocol):
    """Anything able to perform the network exchange for a built request."""

    async def send(self, url: str, options: RequestOptions) -> Any:
        """Send the request and return a response exposing `status` and `ok`."""
        ...


# Middleware stage: response in, (possibly awaitable) response out
Middleware = Callable[[Any], Union[Any, Awaitable[Any]]]

# Event listener: receives the response that triggered the event
EventListener = Callable[[Any], None]
