"""agentiny - A tiny reactive rule engine for agents.

Simple usage:
    from agentiny import Agent

    agent = Agent(initial_state={"count": 1})
    agent.when(lambda s: s["count"] < 3, [lambda s: s.update(count=s["count"] + 1)])

    await agent.start()
    await agent.settle()
    await agent.stop()

Advanced usage:
    from agentiny import Trigger, with_retry, create_llm_action
"""

__version__ = "0.1.0"

# =============================================================================
# CORE API (start here)
# =============================================================================

from .agent import GENERATED_ID_PREFIX, Agent

# Types
from .types import (
    ActionFn,
    AgentConfig,
    AgentStatus,
    ConditionFn,
    ErrorHandler,
    LLMProvider,
    LLMRequest,
    LLMResponse,
    Trigger,
    TriggerFn,
)

# Exceptions
from .exceptions import (
    ActionError,
    ActionTimeoutError,
    AgentAlreadyRunningError,
    AgentError,
    AgentinyError,
    AgentNotRunningError,
    AgentStoppedError,
    DuplicateTriggerError,
    GatewayError,
    InvalidSettleArgumentError,
    ProviderError,
    ProviderNotFoundError,
    RetryExhaustedError,
    SettleTimeoutError,
    StateValidationError,
    TriggerNotFoundError,
)

# Building blocks
from .actions import execute_actions, normalize_error
from .conditions import evaluate_conditions
from .events import EventLedger
from .registry import TriggerRegistry
from .state import State

# =============================================================================
# CONTROL LAYER
# =============================================================================

from .control import (
    BackoffStrategy,
    RetryConfig,
    RetryStrategy,
    with_retry,
    with_schema,
    with_timeout,
    with_validation,
)

# =============================================================================
# GATEWAY LAYER
# =============================================================================

from .gateway import (
    AnthropicProvider,
    BaseProvider,
    GeminiProvider,
    MockProvider,
    OpenAIProvider,
    ProviderFactory,
    create_anthropic_action,
    create_gemini_action,
    create_llm_action,
    create_openai_action,
)

# Utilities
from .utils import configure_logging, get_logger

__all__ = [
    # Version
    "__version__",
    # Core
    "Agent",
    "GENERATED_ID_PREFIX",
    "State",
    "TriggerRegistry",
    "EventLedger",
    "evaluate_conditions",
    "execute_actions",
    "normalize_error",
    # Types
    "ActionFn",
    "AgentConfig",
    "AgentStatus",
    "ConditionFn",
    "ErrorHandler",
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "Trigger",
    "TriggerFn",
    # Exceptions
    "AgentinyError",
    "AgentError",
    "ActionError",
    "ActionTimeoutError",
    "AgentAlreadyRunningError",
    "AgentNotRunningError",
    "AgentStoppedError",
    "DuplicateTriggerError",
    "GatewayError",
    "InvalidSettleArgumentError",
    "ProviderError",
    "ProviderNotFoundError",
    "RetryExhaustedError",
    "SettleTimeoutError",
    "StateValidationError",
    "TriggerNotFoundError",
    # Control
    "BackoffStrategy",
    "RetryConfig",
    "RetryStrategy",
    "with_retry",
    "with_schema",
    "with_timeout",
    "with_validation",
    # Gateway
    "BaseProvider",
    "ProviderFactory",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "MockProvider",
    "create_llm_action",
    "create_openai_action",
    "create_anthropic_action",
    "create_gemini_action",
    # Utilities
    "configure_logging",
    "get_logger",
]
