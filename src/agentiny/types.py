"""Core types and data models for agentiny."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Sequence

from pydantic import BaseModel, Field


# =============================================================================
# Function Types
# =============================================================================

# Each may return a plain value or an awaitable resolving to one.
TriggerFn = Callable[[Any], bool | Awaitable[bool]]
ConditionFn = Callable[[Any], bool | Awaitable[bool]]
ActionFn = Callable[[Any], Awaitable[None] | None]
ErrorHandler = Callable[[Exception], None]


# =============================================================================
# Enums
# =============================================================================


class AgentStatus(str, Enum):
    """Lifecycle status of an agent."""

    IDLE = "idle"  # Created, never started
    RUNNING = "running"  # Polling loop active
    STOPPED = "stopped"  # Stopped after running


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    MOCK = "mock"


# =============================================================================
# Triggers
# =============================================================================


@dataclass
class Trigger:
    """A named rule: when ``check`` and ``conditions`` pass, run ``actions``.

    Attributes:
        id: Unique identifier among the agent's triggers.
        check: Predicate over state deciding whether the trigger fires.
        actions: Effects run in order against the live state.
        conditions: Guards that must all pass. None or empty means always pass.
        repeat: False removes the trigger after its first action phase.
        delay: Seconds to wait between conditions passing and actions starting.
    """

    id: str
    check: TriggerFn
    actions: Sequence[ActionFn] = field(default_factory=list)
    conditions: Sequence[ConditionFn] | None = None
    repeat: bool = True
    delay: float | None = None


# =============================================================================
# Agent Configuration
# =============================================================================


@dataclass
class AgentConfig:
    """Configuration for an Agent."""

    initial_state: Any = None
    triggers: list[Trigger] = field(default_factory=list)
    on_error: ErrorHandler | None = None
    poll_interval: float = 0.01  # seconds between ticks
    name: str = "agent"


# =============================================================================
# LLM Calls
# =============================================================================


class LLMRequest(BaseModel):
    """A single-prompt request to an LLM provider."""

    prompt: str
    model: str | None = Field(default=None, description="Provider default when None")
    max_tokens: int | None = Field(default=None, description="Maximum tokens in the response")
    temperature: float | None = Field(default=None, description="Sampling temperature")


class LLMResponse(BaseModel):
    """A response from an LLM provider."""

    content: str = ""
    model: str
    provider: LLMProvider
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
