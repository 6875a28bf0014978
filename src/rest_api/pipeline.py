"""
Response middleware chain and event listeners for rest_api.
"""
import inspect
import logging
from typing import Any, Callable, Dict, List, Union

from .types import EventListener, Middleware

logger = logging.getLogger(__name__)

SUCCESS_EVENT = "success"
ERROR_EVENT = "error"

EventName = Union[str, int]


class MiddlewareChain:
    """Ordered response transformers, run in registration order."""

    def __init__(self) -> None:
        self._middlewares: List[Middleware] = []

    def use(self, fn: Middleware) -> None:
        """Register a middleware. It must return (or resolve to) the response."""
        if not callable(fn):
            raise TypeError(f"middleware must be callable, got {type(fn).__name__}")
        self._middlewares.append(fn)

    def __len__(self) -> int:
        return len(self._middlewares)

    async def run(self, response: Any) -> Any:
        """
        Pass the response through every middleware.

        The chain is captured when the run starts; middleware registered
        meanwhile applies from the next run.
        An exception from any stage stops the chain and propagates.
        """
        for index, middleware in enumerate(list(self._middlewares)):
            result = middleware(response)
            if inspect.isawaitable(result):
                result = await result
            logger.debug(f"MiddlewareChain.run: stage {index} -> {type(result).__name__}")
            response = result
        return response


def _event_key(event: EventName) -> str:
    return str(event)


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


class ListenerRegistry:
    """Listeners keyed by status code ("404"), "success" or "error"."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventListener]] = {}

    def on(self, event: EventName, listener: EventListener) -> Callable[[], None]:
        """
        Add an event listener.

        Args:
            event: Status code (int or str), "success" or "error"
            listener: Called with the response

        Returns:
            Function to remove the listener
        """
        key = _event_key(event)
        self._listeners.setdefault(key, []).append(listener)
        return lambda: self.off(key, listener)

    def once(self, event: EventName, listener: EventListener) -> Callable[[], None]:
        """Add a listener that is removed after its first call."""
        key = _event_key(event)

        def wrapper(response: Any) -> None:
            self.off(key, wrapper)
            listener(response)

        wrapper.listener = listener  # type: ignore[attr-defined]
        return self.on(key, wrapper)

    def off(self, event: EventName, listener: EventListener) -> None:
        """Remove an event listener, including one added with once()."""
        listeners = self._listeners.get(_event_key(event))
        if not listeners:
            return
        for registered in listeners:
            if registered is listener or getattr(registered, "listener", None) is listener:
                listeners.remove(registered)
                return

    def listeners(self, event: EventName) -> List[EventListener]:
        return list(self._listeners.get(_event_key(event), []))

    def event_names(self) -> List[str]:
        """Names of events with at least one listener."""
        return [name for name, listeners in self._listeners.items() if listeners]

    def emit(self, event: EventName, response: Any) -> bool:
        """
        Call the listeners registered for an event.

        Listener exceptions are logged and never reach the caller.

        Returns:
            Whether any listener was registered
        """
        listeners = self.listeners(event)
        for listener in listeners:
            try:
                listener(response)
            except Exception:
                logger.exception(f"ListenerRegistry.emit: listener for '{event}' failed")
        return bool(listeners)

    def dispatch(self, response: Any) -> None:
        """Emit the status code event, then "success" for 2xx or "error" otherwise."""
        status = response.status
        self.emit(status, response)

        if is_success_status(status):
            self.emit(SUCCESS_EVENT, response)
        else:
            self.emit(ERROR_EVENT, response)
