"""Google Gemini provider implementation for the agentiny gateway."""

import asyncio
import time
from typing import Any

from ...exceptions import ProviderError
from ...types import LLMProvider, LLMRequest, LLMResponse
from .base import BaseProvider


class GeminiProvider(BaseProvider):
    """Google Gemini provider.

    The google-generativeai client is synchronous, so calls run in the
    default executor.

    Example:
        provider = GeminiProvider(api_key="...")
        response = await provider.complete(LLMRequest(prompt="Hello"))
    """

    provider_type = LLMProvider.GEMINI

    default_model = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google API key. If None, uses GOOGLE_API_KEY env var.
            model: Default model for requests that do not name one.
        """
        super().__init__(model)
        self._api_key = api_key
        self._model_instances: dict[str, Any] = {}

    def _get_client(self, model: str) -> Any:
        """Lazily initialize and return a Gemini model client."""
        if model not in self._model_instances:
            try:
                import google.generativeai as genai
            except ImportError:
                raise ImportError(
                    "Google Generative AI package not installed. "
                    "Install with: pip install agentiny[google]"
                )

            if self._api_key:
                genai.configure(api_key=self._api_key)

            self._model_instances[model] = genai.GenerativeModel(model)

        return self._model_instances[model]

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a prompt to Gemini.

        Raises:
            ProviderError: If the request fails.
        """
        model_name = self.resolve_model(request)
        model = self._get_client(model_name)

        start_time = time.time()

        try:
            generation_config: dict[str, Any] = {}
            if request.temperature is not None:
                generation_config["temperature"] = request.temperature
            if request.max_tokens is not None:
                generation_config["max_output_tokens"] = request.max_tokens

            response = await asyncio.get_running_loop().run_in_executor(
                None,
                lambda: model.generate_content(
                    request.prompt,
                    generation_config=generation_config if generation_config else None,
                ),
            )

            latency_ms = (time.time() - start_time) * 1000

            content = response.text or ""

            usage = getattr(response, "usage_metadata", None)
            if usage:
                input_tokens = getattr(usage, "prompt_token_count", 0) or 0
                output_tokens = getattr(usage, "candidates_token_count", 0) or 0
            else:
                # Rough estimate: ~4 chars per token
                input_tokens = len(request.prompt) // 4
                output_tokens = len(content) // 4

            llm_response = LLMResponse(
                content=content,
                model=model_name,
                provider=self.provider_type,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                latency_ms=latency_ms,
            )

            self.record_metrics(llm_response)
            return llm_response

        except Exception as e:
            raise ProviderError("gemini", str(e), e) from e
