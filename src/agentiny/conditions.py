"""Guard condition evaluation for agentiny."""

import logging
from typing import Any, Sequence

from .types import ConditionFn
from .utils.aio import maybe_await

logger = logging.getLogger(__name__)


async def evaluate_conditions(conditions: Sequence[ConditionFn], state: Any) -> bool:
    """Evaluate guard conditions in order against the state.

    Conditions may be sync or async. Evaluation stops at the first condition
    that returns a falsy value or raises; later conditions are not called.

    A raising condition counts as failed. Its exception is not re-raised and
    is not reported to the agent's error handler, unlike action errors.

    Example:
        conditions = [
            lambda s: s["count"] > 0,
            lambda s: s["count"] < 100,
        ]
        await evaluate_conditions(conditions, {"count": 50})  # True

    Args:
        conditions: Guard predicates. Empty means pass.
        state: Current state passed to each predicate.

    Returns:
        True if every condition passed.
    """
    for condition in conditions:
        try:
            result = await maybe_await(condition(state))
        except Exception as e:
            logger.debug(f"Condition raised, treating as failed: {e!r}")
            return False

        if not result:
            return False

    return True
