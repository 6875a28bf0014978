"""
Lightweight REST client for a single configured backend.

Builds the base URL from root, stage, prefix and version, attaches credentials
according to the authorization strategy (None, Basic, Bearer, Custom), merges
per-call options with instance defaults, and dispatches through an injectable
transport (httpx by default).
"""
from .types import (
    ApiResponse,
    AuthorizationStrategy,
    RequestOptions,
    Serializer,
    Transport,
)
from .errors import (
    ConfigurationError,
    InsecureSchemeError,
    InvalidAuthorizationArgsError,
    RestApiError,
    TransportError,
    UnsuccessfulResponseError,
)
from .resolvable import Fixed, Provider, to_resolvable
from .config import (
    ApiSettings,
    DefaultOptions,
    DefaultSerializer,
    TimeoutConfig,
    resolve_settings,
)
from .options import deep_merge, merge_options
from .auth import Authorizer, base64_decode, base64_encode, encode_basic_credentials
from .pipeline import ListenerRegistry, MiddlewareChain
from .transport import CallableTransport, HttpxTransport
from .client import Api

__all__ = [
    # Types
    "ApiResponse",
    "AuthorizationStrategy",
    "RequestOptions",
    "Serializer",
    "Transport",
    # Errors
    "ConfigurationError",
    "InsecureSchemeError",
    "InvalidAuthorizationArgsError",
    "RestApiError",
    "TransportError",
    "UnsuccessfulResponseError",
    # Values
    "Fixed",
    "Provider",
    "to_resolvable",
    # Config
    "ApiSettings",
    "DefaultOptions",
    "DefaultSerializer",
    "TimeoutConfig",
    "resolve_settings",
    # Options
    "deep_merge",
    "merge_options",
    # Auth
    "Authorizer",
    "base64_decode",
    "base64_encode",
    "encode_basic_credentials",
    # Pipeline
    "ListenerRegistry",
    "MiddlewareChain",
    # Transports
    "CallableTransport",
    "HttpxTransport",
    # Client
    "Api",
]

__version__ = "0.6.3"
