"""
Error types for rest_api.
"""
from typing import Any, Optional


class RestApiError(Exception):
    """Base class for all rest_api errors."""

    code = "REST_API_ERROR"


class ConfigurationError(RestApiError):
    """Raised when a required setting is missing or has the wrong type."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class InsecureSchemeError(ConfigurationError):
    """Raised when the API root uses a non-HTTPS scheme and secure_only is set."""

    code = "INSECURE_SCHEME"

    def __init__(self, scheme: str) -> None:
        super().__init__(
            f"API Base URL must use HTTPS (got scheme '{scheme}')", key="root"
        )
        self.scheme = scheme


class InvalidAuthorizationArgsError(RestApiError, ValueError):
    """Raised when authorize() gets neither a token, credentials nor custom auth."""

    code = "INVALID_AUTHORIZATION_ARGS"


class TransportError(RestApiError):
    """Raised by the bundled transport when the network exchange fails."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class UnsuccessfulResponseError(RestApiError):
    """
    Raised when the transport answered but the response is not ok.

    The response (after middleware) is kept on the error so callers can
    inspect the status and body.
    """

    code = "UNSUCCESSFUL_RESPONSE"

    def __init__(self, response: Any) -> None:
        self.response = response
        self.status: Optional[int] = getattr(response, "status", None)
        self.ok: bool = bool(getattr(response, "ok", False))
        super().__init__(f"Request failed with status {self.status}")
