"""Multicast event streams.

An ``EventStream`` keeps an in-process registry of subscribers and calls them
synchronously, in subscription order, whenever a value is emitted. Streams do
not buffer: subscribers only see emissions made after they subscribed.
"""

from itertools import count
from threading import Lock
from typing import Any, Callable, Dict, List

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class Subscription:
    """Handle returned by ``EventStream.subscribe``.

    Cancelling is idempotent; a cancelled subscription never receives
    further emissions.
    """

    def __init__(self, stream: "EventStream", token: int):
        self._stream = stream
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._stream._unsubscribe(self._token)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class EventStream:
    """Named, multicast, non-replaying event stream.

    Handlers are called with whatever positional arguments are passed to
    ``emit``. If a handler raises, the exception is caught and logged, and
    the remaining handlers are still called.

    Attributes:
        name: Stream name used in log entries (e.g., 'lexicon.changed').
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: Dict[int, Callable[..., Any]] = {}
        self._tokens = count()
        self._lock = Lock()

    def subscribe(self, handler: Callable[..., Any]) -> Subscription:
        """Register a handler for future emissions.

        Args:
            handler: Callable invoked with the emitted arguments.

        Returns:
            Subscription that unregisters the handler when cancelled.
        """
        with self._lock:
            token = next(self._tokens)
            self._handlers[token] = handler
            total = len(self._handlers)
        logger.debug(
            "registered_stream_handler",
            stream=self.name,
            handler=getattr(handler, "__name__", "unknown"),
            total_handlers=total,
        )
        return Subscription(self, token)

    def _unsubscribe(self, token: int) -> None:
        with self._lock:
            self._handlers.pop(token, None)

    def emit(self, *args: Any) -> List[Any]:
        """Call every current subscriber with ``args``.

        Args:
            *args: Payload passed positionally to each handler.

        Returns:
            List of return values from handlers that did not raise.
        """
        with self._lock:
            handlers = list(self._handlers.values())

        logger.debug(
            "emitting_stream_event",
            stream=self.name,
            handler_count=len(handlers),
        )

        results = []
        for handler in handlers:
            try:
                results.append(handler(*args))
            except Exception as e:
                logger.error(
                    "stream_handler_failed",
                    stream=self.name,
                    handler=getattr(handler, "__name__", "unknown"),
                    error=str(e),
                )
        return results

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def clear(self) -> None:
        """Remove all subscribers."""
        with self._lock:
            self._handlers.clear()
        logger.debug("cleared_stream_handlers", stream=self.name)
