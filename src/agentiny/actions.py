"""Action execution for agentiny."""

from typing import Any, Sequence

from .exceptions import ActionError
from .types import ActionFn
from .utils.aio import maybe_await


def normalize_error(error: Any) -> Exception:
    """Return ``error`` if it is an exception, otherwise wrap it in ActionError."""
    if isinstance(error, Exception):
        return error
    return ActionError(error)


async def execute_actions(actions: Sequence[ActionFn], state: Any) -> list[Exception]:
    """Run every action in order, collecting errors instead of raising.

    A failing action never stops the ones after it. All actions get the same
    live state object, so mutations made by one are visible to the next.

    Example:
        state = {"count": 0}
        errors = await execute_actions(
            [
                lambda s: s.update(count=s["count"] + 1),
                failing_action,
                lambda s: s.update(count=s["count"] * 3),
            ],
            state,
        )
        # state["count"] == 3, len(errors) == 1

    Args:
        actions: Effects to run.
        state: Live state passed to each action.

    Returns:
        Errors raised by the actions, in order. Empty on full success.
    """
    errors: list[Exception] = []

    for action in actions:
        try:
            await maybe_await(action(state))
        except Exception as e:
            errors.append(normalize_error(e))

    return errors
