"""Timeout wrapper for agentiny actions."""

import asyncio
from typing import Any

from ..exceptions import ActionTimeoutError
from ..types import ActionFn
from ..utils.aio import maybe_await


def with_timeout(action: ActionFn, seconds: float) -> ActionFn:
    """Wrap an action so it fails if it runs longer than ``seconds``.

    The wrapped coroutine is cancelled on timeout. A synchronous action runs
    to completion before the timer can apply.

    Example:
        call_api = with_timeout(call_api, seconds=5.0)

    Raises:
        ActionTimeoutError: From the returned action, on timeout.
    """

    async def timed_action(state: Any) -> None:
        try:
            await asyncio.wait_for(maybe_await(action(state)), timeout=seconds)
        except asyncio.TimeoutError as e:
            raise ActionTimeoutError(seconds) from e

    return timed_action
