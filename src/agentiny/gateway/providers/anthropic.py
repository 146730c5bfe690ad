"""Anthropic provider implementation for the agentiny gateway."""

import time
from typing import Any

from ...exceptions import ProviderError
from ...types import LLMProvider, LLMRequest, LLMResponse
from .base import BaseProvider


class AnthropicProvider(BaseProvider):
    """Anthropic messages API provider.

    Example:
        provider = AnthropicProvider(api_key="sk-ant-...")
        response = await provider.complete(LLMRequest(prompt="Hello"))
    """

    provider_type = LLMProvider.ANTHROPIC

    default_model = "claude-3-haiku-20240307"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        max_tokens: int = 1024,
    ):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. If None, uses ANTHROPIC_API_KEY env var.
            model: Default model for requests that do not name one.
            base_url: Optional custom base URL.
            timeout: Request timeout in seconds.
            max_tokens: Max tokens when a request does not set it.
        """
        super().__init__(model)
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the Anthropic client."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError:
                raise ImportError(
                    "Anthropic package not installed. Install with: pip install agentiny[anthropic]"
                )

            kwargs: dict[str, Any] = {"timeout": self._timeout}
            if self._api_key:
                kwargs["api_key"] = self._api_key
            if self._base_url:
                kwargs["base_url"] = self._base_url

            self._client = AsyncAnthropic(**kwargs)

        return self._client

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a single user message to Anthropic.

        Text blocks of the reply are concatenated; other block types are
        ignored.

        Raises:
            ProviderError: If the request fails.
        """
        client = self._get_client()
        model = self.resolve_model(request)

        start_time = time.time()

        try:
            kwargs: dict[str, Any] = {
                "model": model,
                "messages": [{"role": "user", "content": request.prompt}],
                "max_tokens": request.max_tokens or self._max_tokens,
            }
            if request.temperature is not None:
                kwargs["temperature"] = request.temperature

            response = await client.messages.create(**kwargs)

            latency_ms = (time.time() - start_time) * 1000

            content = ""
            for block in response.content:
                if block.type == "text":
                    content += block.text

            usage = getattr(response, "usage", None)
            llm_response = LLMResponse(
                content=content,
                model=model,
                provider=self.provider_type,
                input_tokens=getattr(usage, "input_tokens", 0) or 0,
                output_tokens=getattr(usage, "output_tokens", 0) or 0,
                latency_ms=latency_ms,
            )

            self.record_metrics(llm_response)
            return llm_response

        except Exception as e:
            raise ProviderError("anthropic", str(e), e) from e
