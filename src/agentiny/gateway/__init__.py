"""agentiny Gateway Layer.

Connects agents to LLM providers:
- Providers for OpenAI, Anthropic and Gemini, each with a lazily imported SDK
- A mock provider for tests and demos
- Action factories that prompt from state and write replies back

Provider SDKs are optional extras; importing this package never needs them.
"""

from .actions import (
    create_anthropic_action,
    create_gemini_action,
    create_llm_action,
    create_openai_action,
)
from .providers import (
    AnthropicProvider,
    BaseProvider,
    GeminiProvider,
    MockProvider,
    OpenAIProvider,
    ProviderFactory,
)

__all__ = [
    "create_llm_action",
    "create_openai_action",
    "create_anthropic_action",
    "create_gemini_action",
    "BaseProvider",
    "ProviderFactory",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "MockProvider",
]
