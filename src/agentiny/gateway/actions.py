"""Action factories that call an LLM and hand the reply back to the agent."""

import logging
from typing import Any, Awaitable, Callable

from ..types import ActionFn, LLMProvider, LLMRequest
from ..utils.aio import maybe_await
from .providers import (
    AnthropicProvider,
    BaseProvider,
    GeminiProvider,
    OpenAIProvider,
    ProviderFactory,
)

logger = logging.getLogger(__name__)

PromptFn = Callable[[Any], str]
ResponseHandler = Callable[[str, Any], Awaitable[None] | None]


def create_llm_action(
    provider: BaseProvider | LLMProvider | str,
    prompt: PromptFn,
    on_response: ResponseHandler,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ActionFn:
    """Create an action that prompts an LLM from state.

    The action builds a prompt from the live state, sends it through
    ``provider`` and calls ``on_response(text, state)``. The handler is where
    state gets updated.

    Example:
        summarize = create_llm_action(
            MockProvider(default_response="short"),
            prompt=lambda s: f"Summarize: {s['text']}",
            on_response=lambda text, s: s.update(summary=text),
        )
        agent.when(lambda s: s["text"] and not s.get("summary"), [summarize])

    Args:
        provider: Provider instance, or a registered provider name.
        prompt: Builds the prompt text from state.
        on_response: Receives the reply text and the live state. May be async.
        model: Model override for every call.
        max_tokens: Maximum tokens in the reply.
        temperature: Sampling temperature.

    Returns:
        Async action. Provider failures surface as ProviderError.
    """
    if not isinstance(provider, BaseProvider):
        provider = ProviderFactory.create(provider)

    async def llm_action(state: Any) -> None:
        request = LLMRequest(
            prompt=prompt(state),
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        response = await provider.complete(request)
        logger.debug(
            f"{response.provider.value} replied with {len(response.content)} chars "
            f"in {response.latency_ms:.0f}ms"
        )
        await maybe_await(on_response(response.content, state))

    return llm_action


def create_openai_action(
    prompt: PromptFn,
    on_response: ResponseHandler,
    api_key: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ActionFn:
    """Create an action backed by OpenAI chat completions.

    ``api_key`` defaults to the OPENAI_API_KEY environment variable.
    """
    provider = OpenAIProvider(api_key=api_key, model=model, base_url=base_url)
    return create_llm_action(
        provider, prompt, on_response, max_tokens=max_tokens, temperature=temperature
    )


def create_anthropic_action(
    prompt: PromptFn,
    on_response: ResponseHandler,
    api_key: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ActionFn:
    """Create an action backed by the Anthropic messages API.

    ``api_key`` defaults to the ANTHROPIC_API_KEY environment variable.
    Replies are capped at 1024 tokens unless ``max_tokens`` says otherwise.
    """
    provider = AnthropicProvider(api_key=api_key, model=model, base_url=base_url)
    return create_llm_action(
        provider, prompt, on_response, max_tokens=max_tokens, temperature=temperature
    )


def create_gemini_action(
    prompt: PromptFn,
    on_response: ResponseHandler,
    api_key: str | None = None,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ActionFn:
    """Create an action backed by Google Gemini.

    ``api_key`` defaults to the GOOGLE_API_KEY environment variable.
    """
    provider = GeminiProvider(api_key=api_key, model=model)
    return create_llm_action(
        provider, prompt, on_response, max_tokens=max_tokens, temperature=temperature
    )
