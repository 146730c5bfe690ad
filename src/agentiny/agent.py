"""Agent: the trigger-condition-action scheduler.

The agent owns a state value and a registry of triggers. A polling loop
re-scans the triggers whenever state changed (or an event was emitted) since
the previous tick. Actions may change state themselves, which makes the next
tick scan again; settle() waits until that cascade has died down.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, NoReturn, Sequence

from .actions import execute_actions, normalize_error
from .conditions import evaluate_conditions
from .events import EventLedger
from .exceptions import (
    AgentAlreadyRunningError,
    AgentError,
    AgentNotRunningError,
    AgentStoppedError,
    InvalidSettleArgumentError,
    SettleTimeoutError,
)
from .registry import TriggerRegistry
from .state import State, compute_fingerprint
from .types import ActionFn, AgentConfig, AgentStatus, ConditionFn, Trigger, TriggerFn
from .utils.aio import maybe_await
from .utils.logging import StructuredLogger

GENERATED_ID_PREFIX = "__trigger_"


@dataclass
class _SettleWaiter:
    """A pending settle() call."""

    quiet_ticks: int
    future: "asyncio.Future[None]"
    timer: asyncio.TimerHandle | None = field(default=None)


class Agent:
    """Reactive agent running trigger-condition-action rules.

    Example:
        agent = Agent(initial_state={"count": 1})

        agent.when(
            lambda s: 0 < s["count"] < 3,
            [lambda s: s.update(count=s["count"] + 1)],
        )

        await agent.start()
        agent.set_state({"count": 1})
        await agent.settle()
        agent.get_state()  # {"count": 3}
        await agent.stop()
    """

    def __init__(self, config: AgentConfig | None = None, **kwargs: Any):
        """Create an agent.

        Args:
            config: Agent configuration.
            **kwargs: AgentConfig fields, used when ``config`` is omitted.
        """
        if config is None:
            config = AgentConfig(**kwargs)
        elif kwargs:
            raise TypeError("Pass either an AgentConfig or keyword arguments, not both")

        self._config = config
        self._state: State[Any] = State(config.initial_state)
        self._ledger = EventLedger()
        self._registry = TriggerRegistry(self._ledger)
        self._status = AgentStatus.IDLE
        self._on_error = config.on_error
        self._poll_interval = config.poll_interval
        self._log = StructuredLogger("agent").with_context(agent=config.name)

        self._loop_task: asyncio.Task[None] | None = None
        self._generation = 0
        self._should_run = False
        self._state_changed = True
        self._idle_ticks = 0
        self._settle_waiters: list[_SettleWaiter] = []
        self._id_counter = itertools.count(1)

        self._state.subscribe(self._mark_changed)

        for trigger in config.triggers:
            self.add_trigger(trigger)

    # =========================================================================
    # State
    # =========================================================================

    def get_state(self) -> Any:
        """Get the current state value (the live object, not a copy)."""
        return self._state.get()

    def set_state(self, new_state: Any) -> None:
        """Replace the state; triggers are re-evaluated on the next tick."""
        self._state.set(new_state)

    def subscribe(self, callback: Callable[[Any], Any]) -> Callable[[], None]:
        """Subscribe to state replacements.

        Returns:
            Unsubscribe function.
        """
        return self._state.subscribe(callback)

    def _mark_changed(self, _value: Any = None) -> None:
        self._state_changed = True

    # =========================================================================
    # Status
    # =========================================================================

    @property
    def status(self) -> AgentStatus:
        return self._status

    @property
    def idle_ticks(self) -> int:
        """Consecutive ticks that observed no change."""
        return self._idle_ticks

    def get_status(self) -> AgentStatus:
        return self._status

    def is_running(self) -> bool:
        return self._status == AgentStatus.RUNNING

    # =========================================================================
    # Triggers
    # =========================================================================

    def add_trigger(self, trigger: Trigger) -> None:
        """Register a trigger.

        Raises:
            DuplicateTriggerError: If a trigger with the same id exists.
        """
        self._registry.add(trigger)

    def get_trigger(self, trigger_id: str) -> Trigger | None:
        return self._registry.get(trigger_id)

    def get_all_triggers(self) -> list[Trigger]:
        """All triggers in registration order."""
        return self._registry.get_all()

    def remove_trigger(self, trigger_id: str) -> None:
        """Remove a trigger.

        Raises:
            TriggerNotFoundError: If no trigger has this id.
        """
        self._registry.remove(trigger_id)

    def clear_triggers(self) -> None:
        self._registry.clear()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Start the polling loop.

        Triggers are evaluated on the first tick even if state was never set.

        Raises:
            AgentAlreadyRunningError: If the agent is running.
        """
        if self._status == AgentStatus.RUNNING:
            self._fail(AgentAlreadyRunningError(self._status.value))

        self._status = AgentStatus.RUNNING
        self._should_run = True
        self._state_changed = True
        self._idle_ticks = 0
        self._ledger.reset_counts()

        self._generation += 1
        self._loop_task = asyncio.create_task(
            self._run_loop(self._generation),
            name=f"agentiny-{self._config.name}",
        )
        self._log.info("Agent started", triggers=len(self._registry))

    async def stop(self) -> None:
        """Stop the polling loop and wait for the current tick to finish.

        Pending settle() calls fail with AgentStoppedError.

        Raises:
            AgentNotRunningError: If the agent is not running.
        """
        if self._status != AgentStatus.RUNNING:
            self._fail(AgentNotRunningError(self._status.value))

        self._status = AgentStatus.STOPPED
        self._should_run = False
        self._reject_settle_waiters()

        task, self._loop_task = self._loop_task, None
        # Called from inside an action: the loop exits after this tick.
        if task is not None and task is not asyncio.current_task():
            await task

        self._log.info("Agent stopped")

    def _fail(self, error: AgentError) -> NoReturn:
        self._report_error(error)
        raise error

    # =========================================================================
    # Settle
    # =========================================================================

    def settle(self, quiet_ticks: int = 2, timeout: float = 10.0) -> "asyncio.Future[None]":
        """Wait until ``quiet_ticks`` consecutive ticks observed no change.

        Use after changing state to wait for every cascading trigger to
        finish. Argument errors are raised right away, before any awaiting.

        Example:
            agent.set_state({"document": text})
            await agent.settle()

        Args:
            quiet_ticks: Consecutive idle ticks required.
            timeout: Seconds to wait before failing.

        Returns:
            Future resolved once settled.

        Raises:
            AgentNotRunningError: If the agent is not running.
            InvalidSettleArgumentError: If quiet_ticks <= 0.
        """
        if not self.is_running():
            raise AgentNotRunningError(self._status.value, "Agent must be running to settle")
        if quiet_ticks <= 0:
            raise InvalidSettleArgumentError(quiet_ticks)

        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()

        if not self._state_changed and self._idle_ticks >= quiet_ticks:
            future.set_result(None)
            return future

        waiter = _SettleWaiter(quiet_ticks=quiet_ticks, future=future)
        waiter.timer = loop.call_later(timeout, self._expire_settle_waiter, waiter, timeout)
        self._settle_waiters.append(waiter)
        return future

    def _check_settle_waiters(self) -> None:
        remaining: list[_SettleWaiter] = []
        for waiter in self._settle_waiters:
            if waiter.future.done():
                # Cancelled by the caller
                self._cancel_timer(waiter)
            elif self._idle_ticks >= waiter.quiet_ticks:
                self._cancel_timer(waiter)
                waiter.future.set_result(None)
            else:
                remaining.append(waiter)
        self._settle_waiters = remaining

    def _expire_settle_waiter(self, waiter: _SettleWaiter, timeout: float) -> None:
        if waiter in self._settle_waiters:
            self._settle_waiters.remove(waiter)
        if not waiter.future.done():
            waiter.future.set_exception(
                SettleTimeoutError(waiter.quiet_ticks, timeout, self._idle_ticks)
            )

    def _reject_settle_waiters(self) -> None:
        waiters, self._settle_waiters = self._settle_waiters, []
        for waiter in waiters:
            self._cancel_timer(waiter)
            if not waiter.future.done():
                waiter.future.set_exception(AgentStoppedError(len(waiters)))

    @staticmethod
    def _cancel_timer(waiter: _SettleWaiter) -> None:
        if waiter.timer is not None:
            waiter.timer.cancel()

    # =========================================================================
    # Execution loop
    # =========================================================================

    def _keep_running(self, generation: int) -> bool:
        return self._should_run and generation == self._generation

    async def _run_loop(self, generation: int) -> None:
        """Poll triggers until stopped.

        Triggers are only scanned on ticks where the change flag is set, so
        idle ticks cost O(1) no matter how many triggers are registered.
        Each tick either resets the idle counter (change seen) or bumps it
        and resolves settle() calls whose threshold is now met.
        """
        while self._keep_running(generation):
            try:
                changed = self._state_changed

                if changed:
                    self._state_changed = False
                    for trigger in self._registry.get_all():
                        if not self._keep_running(generation):
                            break
                        await self._check_and_execute(trigger)

                if changed:
                    self._idle_ticks = 0
                else:
                    self._idle_ticks += 1
                    self._check_settle_waiters()

            except Exception as e:
                self._report_error(normalize_error(e))

            await asyncio.sleep(self._poll_interval)

    async def _check_and_execute(self, trigger: Trigger) -> None:
        """Run one trigger: check, conditions, delay, actions, cleanup.

        Errors from actions are reported one by one; anything else that
        escapes (a raising check, for instance) is reported once. Nothing
        raised here stops the remaining triggers of the tick.
        """
        try:
            state = self._state.get()

            if not await maybe_await(trigger.check(state)):
                return

            if not await evaluate_conditions(trigger.conditions or [], state):
                return

            if trigger.delay and trigger.delay > 0:
                await asyncio.sleep(trigger.delay)

            self._log.debug("Trigger fired", trigger_id=trigger.id)

            before = compute_fingerprint(state)
            errors = await execute_actions(trigger.actions, state)
            if before is not None and compute_fingerprint(state) != before:
                # Mutated in place; rescan next tick
                self._state_changed = True

            for error in errors:
                self._report_error(error, trigger_id=trigger.id)

            if trigger.repeat is False and self._registry.has(trigger.id):
                self._registry.remove(trigger.id)

        except Exception as e:
            self._report_error(normalize_error(e), trigger_id=trigger.id)

    def _report_error(self, error: Exception, **context: Any) -> None:
        if self._on_error is None:
            self._log.error(f"Unhandled error: {error!r}", exc_info=error, **context)
            return

        try:
            self._on_error(error)
        except Exception:
            self._log.error("Error handler raised", exc_info=True, **context)

    # =========================================================================
    # Events
    # =========================================================================

    def emit_event(self, event: str) -> None:
        """Emit an event; its triggers fire once each on the next tick."""
        self._ledger.emit(event)
        self._state_changed = True

    def remove_event_trigger(self, event: str, trigger_id: str) -> None:
        """Remove a trigger created by on().

        ``event`` is accepted for readability at call sites.

        Raises:
            TriggerNotFoundError: If no trigger has this id.
        """
        self.remove_trigger(trigger_id)

    def remove_all_event_triggers_for_event(self, event: str) -> None:
        """Remove every trigger listening to ``event``. Unknown events are ignored."""
        for trigger_id in self._ledger.trigger_ids(event):
            if self._registry.has(trigger_id):
                self.remove_trigger(trigger_id)

    def get_event_triggers_for_event(self, event: str) -> list[Trigger]:
        triggers = []
        for trigger_id in self._ledger.trigger_ids(event):
            trigger = self._registry.get(trigger_id)
            if trigger is not None:
                triggers.append(trigger)
        return triggers

    def get_event_triggers(self) -> dict[str, list[Trigger]]:
        """All event triggers keyed by event name. Events without triggers are omitted."""
        result: dict[str, list[Trigger]] = {}
        for event in self._ledger.associations():
            triggers = self.get_event_triggers_for_event(event)
            if triggers:
                result[event] = triggers
        return result

    # =========================================================================
    # Convenience builders
    # =========================================================================

    def _generate_trigger_id(self) -> str:
        """Next generated id not already taken by a caller-supplied id."""
        while True:
            trigger_id = f"{GENERATED_ID_PREFIX}{next(self._id_counter)}"
            if not self._registry.has(trigger_id):
                return trigger_id

    @staticmethod
    def _split_overload(
        actions_or_conditions: Sequence[Any],
        actions: Sequence[ActionFn] | None,
    ) -> tuple[Sequence[ConditionFn] | None, Sequence[ActionFn]]:
        if actions is None:
            return None, actions_or_conditions
        return actions_or_conditions, actions

    def when(
        self,
        check: TriggerFn,
        actions_or_conditions: Sequence[ActionFn] | Sequence[ConditionFn],
        actions: Sequence[ActionFn] | None = None,
    ) -> str:
        """Add a repeating state trigger.

        ``when(check, actions)`` or ``when(check, conditions, actions)``.

        Returns:
            Generated trigger id.
        """
        conditions, resolved = self._split_overload(actions_or_conditions, actions)
        trigger_id = self._generate_trigger_id()
        self.add_trigger(
            Trigger(id=trigger_id, check=check, conditions=conditions, actions=resolved, repeat=True)
        )
        return trigger_id

    def once(
        self,
        check: TriggerFn,
        actions_or_conditions: Sequence[ActionFn] | Sequence[ConditionFn],
        actions: Sequence[ActionFn] | None = None,
    ) -> str:
        """Add a trigger that removes itself after firing once.

        Same call shapes as when().

        Returns:
            Generated trigger id.
        """
        conditions, resolved = self._split_overload(actions_or_conditions, actions)
        trigger_id = self._generate_trigger_id()
        self.add_trigger(
            Trigger(id=trigger_id, check=check, conditions=conditions, actions=resolved, repeat=False)
        )
        return trigger_id

    def on(
        self,
        event: str,
        actions_or_conditions: Sequence[ActionFn] | Sequence[ConditionFn],
        actions_or_repeat: Sequence[ActionFn] | bool | None = None,
        repeat: bool | None = None,
    ) -> str:
        """Add a trigger that fires once per emit_event(event).

        Call shapes:
            on(event, actions)
            on(event, actions, repeat)
            on(event, conditions, actions, repeat=True)

        Emissions made before the trigger was created are not replayed.

        Returns:
            Generated trigger id.
        """
        conditions: Sequence[ConditionFn] | None
        if actions_or_repeat is None or isinstance(actions_or_repeat, bool):
            conditions = None
            actions: Sequence[ActionFn] = actions_or_conditions
            if isinstance(actions_or_repeat, bool):
                repeat = actions_or_repeat
        else:
            conditions = actions_or_conditions
            actions = actions_or_repeat

        trigger_id = self._generate_trigger_id()
        ledger = self._ledger

        def check(_state: Any) -> bool:
            return ledger.observe(event, trigger_id)

        self.add_trigger(
            Trigger(
                id=trigger_id,
                check=check,
                conditions=conditions,
                actions=actions,
                repeat=True if repeat is None else repeat,
            )
        )
        ledger.bind(event, trigger_id)
        return trigger_id
