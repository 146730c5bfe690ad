"""agentiny utilities."""

from .aio import maybe_await
from .logging import StructuredLogger, configure_logging, get_logger

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "maybe_await",
]
