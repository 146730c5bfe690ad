"""Reactive state container for agentiny.

A single value that is replaced wholesale and broadcast to subscribers.
Subscribers never see each other's failures.
"""

import hashlib
import itertools
import json
import logging
import threading
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compute_fingerprint(value: Any) -> str | None:
    """Compute a deterministic hash of a state value.

    Returns:
        Hex digest, or None if the value cannot be serialized.
    """
    try:
        serialized = json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return None
    return hashlib.sha256(serialized.encode()).hexdigest()[:16]


class State(Generic[T]):
    """Minimal reactive value container.

    Example:
        state = State({"count": 0})

        unsubscribe = state.subscribe(lambda value: print(value))
        state.set({"count": 1})  # prints {'count': 1}

        unsubscribe()
        state.set({"count": 2})  # prints nothing
    """

    def __init__(self, initial_value: T):
        """Initialize the container.

        Args:
            initial_value: Initial state value.
        """
        self._value = initial_value
        self._subscribers: dict[int, Callable[[T], Any]] = {}
        self._tokens = itertools.count()
        self._lock = threading.RLock()

    def get(self) -> T:
        """Get the current value."""
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers in subscription order.

        Args:
            value: New state value.
        """
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers.values())

        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                logger.exception("Error in state subscriber")

    def subscribe(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        """Subscribe to value changes.

        Args:
            callback: Called with the new value on every set().

        Returns:
            Unsubscribe function. Calling it more than once is harmless.
        """
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
