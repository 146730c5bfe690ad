"""Validation wrappers for agentiny actions.

with_validation takes a plain predicate. with_schema validates with pydantic
against a model or any type a TypeAdapter accepts (TypedDict, dataclass, ...).
"""

from typing import Any, Callable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import StateValidationError
from ..types import ActionFn
from ..utils.aio import maybe_await


def with_validation(action: ActionFn, validate: Callable[[Any], bool]) -> ActionFn:
    """Run ``action`` only when ``validate(state)`` is truthy.

    Raises:
        StateValidationError: From the returned action, when validation fails.
    """

    async def validated_action(state: Any) -> None:
        if not validate(state):
            raise StateValidationError("State validation failed")
        await maybe_await(action(state))

    return validated_action


def with_schema(action: ActionFn, schema: Any) -> ActionFn:
    """Run ``action`` only when state matches a pydantic schema.

    The action still receives the live state, not the parsed copy, so its
    mutations reach the agent.

    Example:
        class Document(BaseModel):
            text: str
            words: int = 0

        count_words = with_schema(count_words, Document)

    Args:
        action: Action to wrap.
        schema: Pydantic model class or any type accepted by TypeAdapter.

    Raises:
        StateValidationError: Immediately if ``schema`` is unusable; from the
            returned action when state does not match.
    """
    try:
        adapter = TypeAdapter(schema)
    except Exception as e:
        raise StateValidationError(f"Invalid schema: {e}") from e

    async def schema_action(state: Any) -> None:
        try:
            adapter.validate_python(state)
        except PydanticValidationError as e:
            raise StateValidationError(
                f"State validation failed: {e.error_count()} error(s)",
                errors=e.errors(),
            ) from e
        await maybe_await(action(state))

    return schema_action
