"""agentiny Control Layer.

Wrappers that turn an action into a safer action. Each takes an action and
returns a new one; the scheduler sees an ordinary action whose errors it
collects.

Components:
- retry: Retry with linear or exponential backoff
- timeout: Per-action time limit
- validation: Predicate and pydantic schema guards
"""

from .retry import BackoffStrategy, RetryConfig, RetryStrategy, with_retry
from .timeout import with_timeout
from .validation import with_schema, with_validation

__all__ = [
    # Retry
    "BackoffStrategy",
    "RetryConfig",
    "RetryStrategy",
    "with_retry",
    # Timeout
    "with_timeout",
    # Validation
    "with_schema",
    "with_validation",
]
