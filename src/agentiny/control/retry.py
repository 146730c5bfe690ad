"""Retry wrapper for agentiny actions.

Backoff strategies:
- Exponential: delay, 2*delay, 4*delay, ...
- Linear: delay, 2*delay, 3*delay, ...
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..exceptions import RetryExhaustedError
from ..types import ActionFn
from ..utils.aio import maybe_await

logger = logging.getLogger(__name__)


class BackoffStrategy(str, Enum):
    """How the wait grows between attempts."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    attempts: int = 3
    delay: float = 1.0  # seconds before the first retry
    backoff: BackoffStrategy = BackoffStrategy.EXPONENTIAL

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {self.attempts}")
        self.backoff = BackoffStrategy(self.backoff)


class RetryStrategy:
    """Runs a callable until it succeeds or attempts run out.

    Example:
        strategy = RetryStrategy(RetryConfig(attempts=3, delay=0.5))
        await strategy.execute(fetch_data, state)
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
    ):
        """Initialize retry strategy.

        Args:
            config: Retry configuration.
            on_retry: Callback before each wait (attempt, error, delay).
        """
        self._config = config or RetryConfig()
        self._on_retry = on_retry

    @property
    def config(self) -> RetryConfig:
        return self._config

    def calculate_delay(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        if self._config.backoff == BackoffStrategy.EXPONENTIAL:
            return self._config.delay * (2 ** (attempt - 1))
        return self._config.delay * attempt

    async def execute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``func`` with retries. Sync and async callables both work.

        Raises:
            RetryExhaustedError: If every attempt fails. Chained from the
                last error.
        """
        attempt = 1
        while True:
            try:
                return await maybe_await(func(*args, **kwargs))
            except Exception as e:
                logger.warning(f"Attempt {attempt} failed: {e}")

                if attempt >= self._config.attempts:
                    raise RetryExhaustedError(self._config.attempts, e) from e

                delay = self.calculate_delay(attempt)
                logger.info(f"Retrying in {delay:.2f}s (attempt {attempt + 1}/{self._config.attempts})")

                if self._on_retry:
                    self._on_retry(attempt, e, delay)

                await asyncio.sleep(delay)
                attempt += 1


def with_retry(
    action: ActionFn,
    attempts: int = 3,
    backoff: BackoffStrategy | str = BackoffStrategy.EXPONENTIAL,
    delay: float = 1.0,
    on_retry: Callable[[int, Exception, float], None] | None = None,
) -> ActionFn:
    """Wrap an action so failures are retried with backoff.

    Example:
        fetch = with_retry(fetch_data, attempts=3, backoff="linear", delay=0.5)
        agent.when(lambda s: s["url"], [fetch])

    Args:
        action: Action to wrap.
        attempts: Total attempts, including the first.
        backoff: "exponential" or "linear".
        delay: Base delay in seconds.
        on_retry: Callback before each wait (attempt, error, delay).

    Returns:
        Async action raising RetryExhaustedError when all attempts fail.
    """
    strategy = RetryStrategy(
        RetryConfig(attempts=attempts, delay=delay, backoff=BackoffStrategy(backoff)),
        on_retry=on_retry,
    )

    async def retrying_action(state: Any) -> None:
        await strategy.execute(action, state)

    return retrying_action
