"""Custom exceptions for agentiny."""

from typing import Any


class AgentinyError(Exception):
    """Base exception for all agentiny errors."""

    pass


# =============================================================================
# Agent Exceptions
# =============================================================================


class AgentError(AgentinyError):
    """Raised on agent misuse.

    Carries a stable ``code`` for programmatic handling and a ``context``
    dict with the values involved.
    """

    code = "AGENT_ERROR"

    def __init__(self, message: str, code: str | None = None, context: dict[str, Any] | None = None):
        self.code = code or self.code
        self.context = context or {}
        super().__init__(message)


class DuplicateTriggerError(AgentError):
    """Raised when a trigger id is already registered."""

    code = "DUPLICATE_TRIGGER"

    def __init__(self, trigger_id: str):
        self.trigger_id = trigger_id
        super().__init__(
            f'Trigger with id "{trigger_id}" already exists',
            context={"trigger_id": trigger_id},
        )


class TriggerNotFoundError(AgentError):
    """Raised when a trigger id is not registered."""

    code = "TRIGGER_NOT_FOUND"

    def __init__(self, trigger_id: str):
        self.trigger_id = trigger_id
        super().__init__(
            f'Trigger with id "{trigger_id}" not found',
            context={"trigger_id": trigger_id},
        )


class AgentAlreadyRunningError(AgentError):
    """Raised when starting an agent that is already running."""

    code = "AGENT_ALREADY_RUNNING"

    def __init__(self, status: str):
        self.status = status
        super().__init__("Agent is already running", context={"current_status": status})


class AgentNotRunningError(AgentError):
    """Raised when an operation requires a running agent."""

    code = "AGENT_NOT_RUNNING"

    def __init__(self, status: str, message: str = "Agent is not running"):
        self.status = status
        super().__init__(message, context={"current_status": status})


class InvalidSettleArgumentError(AgentError):
    """Raised when settle() gets a non-positive quiet tick count."""

    code = "INVALID_ARGUMENT"

    def __init__(self, quiet_ticks: int):
        self.quiet_ticks = quiet_ticks
        super().__init__(
            f"quiet_ticks must be a positive integer, got {quiet_ticks}",
            context={"quiet_ticks": quiet_ticks},
        )


class SettleTimeoutError(AgentError):
    """Raised when settle() does not observe enough idle ticks in time."""

    code = "SETTLE_TIMEOUT"

    def __init__(self, quiet_ticks: int, timeout: float, idle_ticks: int):
        self.quiet_ticks = quiet_ticks
        self.timeout = timeout
        self.idle_ticks = idle_ticks
        super().__init__(
            f"settle() timed out after {timeout}s waiting for {quiet_ticks} quiet ticks",
            context={"timeout": timeout, "quiet_ticks": quiet_ticks, "idle_ticks": idle_ticks},
        )


class AgentStoppedError(AgentError):
    """Raised on pending settle() calls when the agent stops."""

    code = "AGENT_STOPPED"

    def __init__(self, pending: int):
        self.pending = pending
        super().__init__(
            "Agent stopped while waiting to settle",
            context={"pending_settles": pending},
        )


class ActionError(AgentinyError):
    """Wraps a failure value that is not an exception instance."""

    def __init__(self, original: Any):
        self.original = original
        super().__init__(str(original))


# =============================================================================
# Control Exceptions
# =============================================================================


class RetryExhaustedError(AgentinyError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Retry exhausted after {attempts} attempts: {last_error}")


class ActionTimeoutError(AgentinyError, TimeoutError):
    """Raised when a wrapped action exceeds its time budget."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        super().__init__(f"Action timeout after {seconds}s")


class StateValidationError(AgentinyError):
    """Raised when state fails validation before an action runs."""

    def __init__(self, message: str, errors: list[Any] | None = None):
        self.errors = errors or []
        super().__init__(message)


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(AgentinyError):
    """Base exception for gateway errors."""

    pass


class ProviderError(GatewayError):
    """Raised when a provider call fails."""

    def __init__(self, provider: str, message: str, original_error: Exception | None = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"Provider '{provider}' error: {message}")


class ProviderNotFoundError(GatewayError):
    """Raised when a requested provider is not registered."""

    def __init__(self, provider: str, available: list[str] | None = None):
        self.provider = provider
        self.available = available or []
        super().__init__(
            f"Provider '{provider}' not found. Available providers: {', '.join(self.available)}"
        )
