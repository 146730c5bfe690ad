"""Base provider interface for the agentiny gateway.

All LLM provider implementations must inherit from BaseProvider.
"""

from abc import ABC, abstractmethod
from typing import Any

from ...exceptions import ProviderNotFoundError
from ...types import LLMProvider, LLMRequest, LLMResponse


class BaseProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses create their SDK client lazily so that importing agentiny
    never requires the optional provider packages.

    Example:
        class EchoProvider(BaseProvider):
            provider_type = LLMProvider.MOCK
            default_model = "echo"

            async def complete(self, request: LLMRequest) -> LLMResponse:
                return LLMResponse(
                    content=request.prompt,
                    model=self.resolve_model(request),
                    provider=self.provider_type,
                )
    """

    provider_type: LLMProvider

    default_model: str = ""

    def __init__(self, model: str | None = None):
        """Initialize the base provider.

        Args:
            model: Model used when a request does not name one.
        """
        self._model = model
        self._total_calls = 0
        self._total_tokens = 0
        self._total_latency_ms = 0.0

    @property
    def model(self) -> str:
        return self._model or self.default_model

    def resolve_model(self, request: LLMRequest) -> str:
        """Model for a request: the request's, then the provider's."""
        return request.model or self.model

    @abstractmethod
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request to the LLM.

        Raises:
            ProviderError: If the request fails.
        """
        pass

    def record_metrics(self, response: LLMResponse) -> None:
        self._total_calls += 1
        self._total_tokens += response.input_tokens + response.output_tokens
        self._total_latency_ms += response.latency_ms

    def get_metrics(self) -> dict[str, Any]:
        """Get provider metrics."""
        return {
            "total_calls": self._total_calls,
            "total_tokens": self._total_tokens,
            "total_latency_ms": self._total_latency_ms,
            "avg_latency_ms": (
                self._total_latency_ms / self._total_calls if self._total_calls > 0 else 0
            ),
        }

    def reset_metrics(self) -> None:
        self._total_calls = 0
        self._total_tokens = 0
        self._total_latency_ms = 0.0


class ProviderFactory:
    """Registry of provider classes by name.

    Example:
        ProviderFactory.register("echo", EchoProvider)
        provider = ProviderFactory.create("echo", model="echo-2")
    """

    _providers: dict[str, type[BaseProvider]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[BaseProvider]) -> None:
        cls._providers[name] = provider_class

    @classmethod
    def create(cls, name: str | LLMProvider, **kwargs: Any) -> BaseProvider:
        """Create a provider instance.

        Raises:
            ProviderNotFoundError: If no provider is registered under ``name``.
        """
        key = name.value if isinstance(name, LLMProvider) else name
        if key not in cls._providers:
            raise ProviderNotFoundError(key, cls.list_providers())
        return cls._providers[key](**kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List registered providers."""
        return list(cls._providers.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._providers
