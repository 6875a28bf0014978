"""
Api client: request dispatch and REST verb helpers.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import diagnostics
from .auth import Authorizer, base64_decode, base64_encode
from .config import ApiSettings, default_serializer, resolve_settings
from .errors import UnsuccessfulResponseError
from .options import OptionsInput, merge_options, options_to_dict
from .pipeline import EventName, ListenerRegistry, MiddlewareChain
from .transport import CallableTransport, HttpxTransport
from .types import EventListener, Middleware, RequestBody, Serializer, Transport
from .urls import base_url, build_url

logger = logging.getLogger(__name__)

BodyInput = Union[RequestBody, Mapping[str, Any], List[Any], None]


def _resolve_transport(transport: Any) -> Transport:
    if transport is None:
        return HttpxTransport()
    if hasattr(transport, "send"):
        return transport
    if callable(transport):
        return CallableTransport(transport)
    raise TypeError(
        f"transport must provide send(url, options) or be a coroutine function, "
        f"got {type(transport).__name__}"
    )


class Api:
    """
    Client for a single REST backend.

    Example:
        api = Api({"root": "api.example.com", "version": "v1",
                   "authorization_strategy": "Bearer"})
        api.authorize(token=lambda: session.get("token"))

        todos = await api.get("todos")
        await api.post("todos", {"name": "foobar"})
    """

    def __init__(
        self,
        settings: Union[Mapping[str, Any], ApiSettings, None] = None,
        transport: Any = None,
        serializer: Optional[Serializer] = None,
        **overrides: Any,
    ):
        self._settings = resolve_settings(settings, **overrides)
        self._transport = _resolve_transport(transport)
        self._authorizer = Authorizer(self._settings.authorization_strategy)
        self._middlewares = MiddlewareChain()
        self._events = ListenerRegistry()
        self._serializer: Serializer = serializer or default_serializer

    @property
    def settings(self) -> ApiSettings:
        return self._settings

    @property
    def root(self) -> str:
        return self._settings.root

    @property
    def stage(self) -> Optional[str]:
        return self._settings.stage

    @property
    def prefix(self) -> Optional[str]:
        return self._settings.prefix

    @property
    def version(self) -> Optional[str]:
        return self._settings.version

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    # Authorization

    def authorize(
        self,
        token: Any = None,
        username: Any = None,
        password: Any = None,
        headers: Any = None,
        validate: Optional[Callable[[], Any]] = None,
    ) -> None:
        """
        Register credentials for this API.

        A token (string or zero-argument function) is used as-is. With the
        Basic strategy, username and password (strings or functions) are
        encoded as base64 "<username>:<password>" on every request. With the
        Custom strategy, headers (mapping or function) are sent whenever
        validate() returns true.

        Raises:
            InvalidAuthorizationArgsError: none of the above combinations given
        """
        self._authorizer.authorize(
            token=token,
            username=username,
            password=password,
            headers=headers,
            validate=validate,
        )

    def has_valid_token(self) -> bool:
        return self._authorizer.has_valid_token()

    def is_authorized(self) -> bool:
        """Whether requests will currently carry credentials."""
        return self._authorizer.is_authorized()

    def base64encode(self, text: str) -> str:
        return base64_encode(text)

    def base64decode(self, b64: str, encoding: str = "utf-8") -> str:
        return base64_decode(b64, encoding)

    # URLs

    def base_url(self) -> str:
        """root + stage + prefix + version, with a trailing slash."""
        return base_url(self._settings)

    def build_url(self, path: str) -> str:
        return build_url(self._settings, path)

    # Middleware and events

    def use(self, fn: Middleware) -> None:
        """Register a response middleware (must return or resolve to the response)."""
        self._middlewares.use(fn)

    def on(self, event: EventName, listener: EventListener) -> Callable[[], None]:
        """Listen for a status code (e.g. 401 or "401"), "success" or "error"."""
        return self._events.on(event, listener)

    def once(self, event: EventName, listener: EventListener) -> Callable[[], None]:
        return self._events.once(event, listener)

    def off(self, event: EventName, listener: EventListener) -> None:
        self._events.off(event, listener)

    def event_names(self) -> List[str]:
        return self._events.event_names()

    # Dispatch

    async def call_route(self, path: str, options: OptionsInput = None) -> Any:
        """
        Generic request execution method.

        Args:
            path: Path relative to the base URL
            options: method, headers, body and transport keyword arguments,
                layered over the default options

        Returns:
            The response after middleware, when it is ok

        Raises:
            UnsuccessfulResponseError: the response is not ok
            Exception: whatever the transport or a middleware raised
        """
        self._debug("Calling route:", path)

        call_options = merge_options(self._settings.default_options, options)

        if self.is_authorized():
            call_options.headers = self._authorizer.apply(call_options.headers)

        url = self.build_url(path)
        logger.debug(f"Api.call_route: method={call_options.method}, url={url}")
        if self._settings.verbose:
            diagnostics.print_request(url, call_options)

        response = await self._transport.send(url, call_options)
        response = await self._middlewares.run(response)
        self._events.dispatch(response)

        logger.debug(f"Api.call_route: status={getattr(response, 'status', None)} for {url}")
        if self._settings.verbose:
            diagnostics.print_response(url, response)

        if not response.ok:
            raise UnsuccessfulResponseError(response)
        return response

    def _serialize_body(self, body: BodyInput) -> RequestBody:
        if isinstance(body, (str, bytes)):
            return body
        return self._serializer.serialize({} if body is None else body)

    def _with(self, options: OptionsInput, **values: Any) -> Dict[str, Any]:
        return {**options_to_dict(options), **values}

    async def get(self, path: str, options: OptionsInput = None) -> Any:
        """GET request."""
        return await self.call_route(path, self._with(options, method="GET"))

    async def post(self, path: str, body: BodyInput = None, options: OptionsInput = None) -> Any:
        """POST request with a JSON-serialized body."""
        return await self.call_route(
            path, self._with(options, method="POST", body=self._serialize_body(body))
        )

    async def put(self, path: str, body: BodyInput = None, options: OptionsInput = None) -> Any:
        """PUT request with a JSON-serialized body."""
        return await self.call_route(
            path, self._with(options, method="PUT", body=self._serialize_body(body))
        )

    async def patch(self, path: str, body: BodyInput = None, options: OptionsInput = None) -> Any:
        """PATCH request with a JSON-serialized body."""
        return await self.call_route(
            path, self._with(options, method="PATCH", body=self._serialize_body(body))
        )

    async def delete(self, path: str, options: OptionsInput = None) -> Any:
        """DELETE request."""
        return await self.call_route(path, self._with(options, method="DELETE"))

    async def head(self, path: str, options: OptionsInput = None) -> Any:
        """HEAD request; never sends a body."""
        values = self._with(options, method="HEAD")
        values.pop("body", None)
        return await self.call_route(path, values)

    # Lifecycle

    async def close(self) -> None:
        """Close the transport if it supports closing."""
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "Api":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    def _debug(self, *args: Any) -> None:
        """Print args when the verbose setting is on."""
        if self._settings.verbose:
            diagnostics.print_debug(*args)
