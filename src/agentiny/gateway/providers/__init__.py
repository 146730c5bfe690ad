"""LLM provider implementations for the agentiny gateway.

Supported providers:
- OpenAI (chat completions)
- Anthropic (messages API)
- Google Gemini (google-generativeai)
- Mock (for testing)
"""

from .anthropic import AnthropicProvider
from .base import BaseProvider, ProviderFactory
from .gemini import GeminiProvider
from .mock import MockProvider
from .openai import OpenAIProvider

# Register providers
ProviderFactory.register("openai", OpenAIProvider)
ProviderFactory.register("anthropic", AnthropicProvider)
ProviderFactory.register("gemini", GeminiProvider)
ProviderFactory.register("mock", MockProvider)

__all__ = [
    "BaseProvider",
    "ProviderFactory",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "MockProvider",
]
