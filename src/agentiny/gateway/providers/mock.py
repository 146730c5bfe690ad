"""Mock provider for running agentiny without external API calls."""

import asyncio
import random
import time
from typing import Callable

from ...exceptions import ProviderError
from ...types import LLMProvider, LLMRequest, LLMResponse
from .base import BaseProvider


class MockProvider(BaseProvider):
    """Mock LLM provider for tests and demos.

    Replies are chosen by the first keyword found in the prompt
    (case-insensitive), then by ``response_generator``, then by
    ``default_response``.

    Example:
        provider = MockProvider(
            responses={"weather": "Sunny"},
            latency_ms=0,
        )
    """

    provider_type = LLMProvider.MOCK

    default_model = "mock-model"

    def __init__(
        self,
        responses: dict[str, str] | None = None,
        default_response: str = "This is a mock response from agentiny MockProvider.",
        latency_ms: float = 0.0,
        tokens_per_call: tuple[int, int] = (100, 50),
        fail_rate: float = 0.0,
        response_generator: Callable[[LLMRequest], str] | None = None,
        model: str | None = None,
    ):
        """Initialize mock provider.

        Args:
            responses: Dict mapping keywords to responses.
            default_response: Default response when nothing else matches.
            latency_ms: Simulated latency in milliseconds.
            tokens_per_call: Tuple of (input_tokens, output_tokens) per call.
            fail_rate: Probability of simulated failure (0.0-1.0).
            response_generator: Custom function to generate responses.
            model: Default model name reported in responses.
        """
        super().__init__(model)
        self._responses = responses or {}
        self._default_response = default_response
        self._latency_ms = latency_ms
        self._tokens_per_call = tokens_per_call
        self._fail_rate = fail_rate
        self._response_generator = response_generator
        self._call_log: list[LLMRequest] = []

    @property
    def call_log(self) -> list[LLMRequest]:
        """Requests made to this provider, oldest first."""
        return self._call_log

    def set_response(self, keyword: str, response: str) -> None:
        self._responses[keyword] = response

    async def complete(self, request: LLMRequest) -> LLMResponse:
        self._call_log.append(request)

        start_time = time.time()
        if self._latency_ms:
            await asyncio.sleep(self._latency_ms / 1000)

        if self._fail_rate and random.random() < self._fail_rate:
            raise ProviderError("mock", "Simulated failure")

        input_tokens, output_tokens = self._tokens_per_call
        response = LLMResponse(
            content=self._generate_response(request),
            model=self.resolve_model(request),
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=(time.time() - start_time) * 1000,
        )

        self.record_metrics(response)
        return response

    def _generate_response(self, request: LLMRequest) -> str:
        prompt = request.prompt.lower()
        for keyword, response in self._responses.items():
            if keyword.lower() in prompt:
                return response

        if self._response_generator:
            return self._response_generator(request)

        return self._default_response

    def reset(self) -> None:
        """Reset call log and metrics."""
        self._call_log.clear()
        self.reset_metrics()
