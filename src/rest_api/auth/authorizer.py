"""
Authorization state and header resolution for rest_api.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..errors import InvalidAuthorizationArgsError
from ..resolvable import Provider, Resolvable, resolve_value, to_resolvable
from ..types import AuthorizationStrategy
from .encoding import encode_basic_credentials

logger = logging.getLogger(__name__)
LOG_PREFIX = f"[AUTH:{__file__}]"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


@dataclass(frozen=True)
class TokenAuth:
    """A token that is resolved again on every read."""

    token: Resolvable

    def value(self) -> Optional[str]:
        resolved = self.token.resolve()
        return None if resolved is None else str(resolved)


@dataclass(frozen=True)
class CustomAuth:
    """Caller supplied headers plus a predicate telling whether they apply."""

    headers: Resolvable
    validate: Callable[[], Any]

    def resolve_headers(self) -> Dict[str, str]:
        return dict(self.headers.resolve() or {})


AuthState = Union[TokenAuth, CustomAuth, None]


class Authorizer:
    """
    Holds the credentials registered for an Api instance.

    Nothing resolved is ever cached: tokens, credentials and custom headers
    are read again for every request so externally rotated values apply on
    the next call.
    """

    def __init__(self, strategy: AuthorizationStrategy = AuthorizationStrategy.NONE):
        self._strategy = AuthorizationStrategy(strategy)
        self._token: Optional[TokenAuth] = None
        self._custom: Optional[CustomAuth] = None

    @property
    def strategy(self) -> AuthorizationStrategy:
        return self._strategy

    @property
    def state(self) -> AuthState:
        """The active credential record, custom auth first."""
        return self._custom or self._token

    def authorize(
        self,
        token: Any = None,
        username: Any = None,
        password: Any = None,
        headers: Union[Mapping[str, str], Callable[[], Mapping[str, str]], None] = None,
        validate: Optional[Callable[[], Any]] = None,
    ) -> None:
        """
        Register credentials.

        Args:
            token: Token string or zero-argument function returning one. Stored
                whatever the strategy is.
            username: Username or function, Basic strategy only
            password: Password or function, Basic strategy only
            headers: Header mapping or function returning one, Custom strategy only
            validate: Predicate telling whether the custom headers apply, Custom only

        Raises:
            InvalidAuthorizationArgsError: when no usable combination was given
        """
        if token:
            self._token = TokenAuth(to_resolvable(token))
            logger.debug(
                f"{LOG_PREFIX} authorize: stored token (lazy={callable(token)}) "
                f"for strategy={self._strategy.value}"
            )
        elif self._strategy is AuthorizationStrategy.BASIC and username and password:

            def basic_token() -> str:
                return encode_basic_credentials(
                    resolve_value(username), resolve_value(password)
                )

            self._token = TokenAuth(Provider(basic_token))
            logger.debug(f"{LOG_PREFIX} authorize: stored basic credentials provider")
        elif (
            self._strategy is AuthorizationStrategy.CUSTOM
            and headers is not None
            and validate is not None
        ):
            if not callable(validate):
                raise InvalidAuthorizationArgsError(
                    f"validate must be a function, got {type(validate).__name__}"
                )
            self._custom = CustomAuth(to_resolvable(headers), validate)
            logger.debug(f"{LOG_PREFIX} authorize: stored custom auth")
        else:
            raise InvalidAuthorizationArgsError(
                "Invalid args to authorize(): provide a token, username and password "
                "(Basic), or headers and validate (Custom)"
            )

    def has_valid_token(self) -> bool:
        """Whether a token is stored and resolves to a non-blank string."""
        if self._token is None:
            return False
        value = self._token.value()
        return bool(value) and value.strip() != ""

    def is_authorized(self) -> bool:
        """Whether the next request should carry credentials."""
        if self._strategy is AuthorizationStrategy.CUSTOM and self._custom is not None:
            return bool(self._custom.validate())
        return self._strategy is not AuthorizationStrategy.NONE and self.has_valid_token()

    def apply(self, headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Return a copy of headers with the authorization headers added.

        Only meaningful when is_authorized() holds. Custom headers override
        headers of the same name.
        """
        result = dict(headers or {})

        if self._custom is not None:
            custom_headers = self._custom.resolve_headers()
            logger.debug(f"{LOG_PREFIX} apply: custom header keys={sorted(custom_headers)}")
            result.update(custom_headers)
            return result

        token = self._token.value() if self._token is not None else None
        result["Authorization"] = f"{self._strategy.value} {token}"
        logger.debug(
            f"{LOG_PREFIX} apply: strategy={self._strategy.value}, "
            f"Authorization={_mask_value(result['Authorization'])}"
        )
        return result
