"""OpenAI provider implementation for the agentiny gateway."""

import time
from typing import Any

from ...exceptions import ProviderError
from ...types import LLMProvider, LLMRequest, LLMResponse
from .base import BaseProvider


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions provider.

    Example:
        provider = OpenAIProvider(api_key="sk-...")
        response = await provider.complete(LLMRequest(prompt="Hello"))
    """

    provider_type = LLMProvider.OPENAI

    default_model = "gpt-5-nano-2025-08-07"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If None, uses OPENAI_API_KEY env var.
            model: Default model for requests that do not name one.
            base_url: Optional custom base URL (for Azure, proxies, etc.).
            timeout: Request timeout in seconds.
        """
        super().__init__(model)
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the OpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError:
                raise ImportError(
                    "OpenAI package not installed. Install with: pip install agentiny[openai]"
                )

            kwargs: dict[str, Any] = {"timeout": self._timeout}
            if self._api_key:
                kwargs["api_key"] = self._api_key
            if self._base_url:
                kwargs["base_url"] = self._base_url

            self._client = AsyncOpenAI(**kwargs)

        return self._client

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a single user message to OpenAI.

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
            }
            if request.max_tokens is not None:
                kwargs["max_tokens"] = request.max_tokens
            if request.temperature is not None:
                kwargs["temperature"] = request.temperature

            response = await client.chat.completions.create(**kwargs)

            latency_ms = (time.time() - start_time) * 1000

            content = ""
            if response.choices:
                content = response.choices[0].message.content or ""

            usage = getattr(response, "usage", None)
            llm_response = LLMResponse(
                content=content,
                model=model,
                provider=self.provider_type,
                input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(usage, "completion_tokens", 0) or 0,
                latency_ms=latency_ms,
            )

            self.record_metrics(llm_response)
            return llm_response

        except Exception as e:
            raise ProviderError("openai", str(e), e) from e
