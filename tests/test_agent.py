"""Tests for the Agent scheduler."""

import asyncio
import logging

import pytest

from agentiny import (
    GENERATED_ID_PREFIX,
    Agent,
    AgentAlreadyRunningError,
    AgentConfig,
    AgentNotRunningError,
    AgentStatus,
    DuplicateTriggerError,
    Trigger,
    TriggerNotFoundError,
)


def make_agent(initial_state=None, **kwargs) -> Agent:
    kwargs.setdefault("poll_interval", 0.001)
    return Agent(initial_state=initial_state if initial_state is not None else {}, **kwargs)


class TestAgentLifecycle:
    """Tests for start/stop and status."""

    @pytest.mark.asyncio
    async def test_status_transitions(self):
        agent = make_agent()
        assert agent.get_status() == AgentStatus.IDLE
        assert not agent.is_running()

        await agent.start()
        assert agent.status == AgentStatus.RUNNING
        assert agent.is_running()

        await agent.stop()
        assert agent.get_status() == AgentStatus.STOPPED

    @pytest.mark.asyncio
    async def test_start_twice_fails(self):
        errors = []
        agent = make_agent(on_error=errors.append)
        await agent.start()

        with pytest.raises(AgentAlreadyRunningError) as exc_info:
            await agent.start()

        assert exc_info.value.code == "AGENT_ALREADY_RUNNING"
        assert errors == [exc_info.value]
        await agent.stop()

    @pytest.mark.asyncio
    async def test_stop_when_not_running_fails(self):
        agent = make_agent(on_error=lambda e: None)

        with pytest.raises(AgentNotRunningError) as exc_info:
            await agent.stop()

        assert exc_info.value.context == {"current_status": "idle"}

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        fired = []
        agent = make_agent()
        agent.when(lambda s: True, [lambda s: fired.append(1)])

        await agent.start()
        await agent.settle()
        await agent.stop()

        await agent.start()
        await agent.settle()
        await agent.stop()

        # One evaluation per start
        assert fired == [1, 1]

    @pytest.mark.asyncio
    async def test_stop_from_inside_action(self):
        agent = make_agent()

        async def shutdown(state):
            await agent.stop()

        agent.when(lambda s: True, [shutdown])
        await agent.start()

        for _ in range(200):
            if not agent.is_running():
                break
            await asyncio.sleep(0.005)

        assert agent.get_status() == AgentStatus.STOPPED

    @pytest.mark.asyncio
    async def test_stop_waits_for_tick_and_skips_remaining_triggers(self):
        """stop() lets the running action finish; later triggers never fire."""
        log = []
        agent = make_agent()

        async def slow(state):
            log.append("slow-start")
            await asyncio.sleep(0.05)
            log.append("slow-end")

        agent.when(lambda s: True, [slow])
        agent.when(lambda s: True, [lambda s: log.append("second")])

        await agent.start()
        for _ in range(200):
            if log:
                break
            await asyncio.sleep(0.001)

        await agent.stop()
        assert log == ["slow-start", "slow-end"]

        await asyncio.sleep(0.02)
        assert log == ["slow-start", "slow-end"]

    def test_config_and_kwargs_are_exclusive(self):
        with pytest.raises(TypeError):
            Agent(AgentConfig(), poll_interval=0.5)

    def test_config_triggers_are_registered(self):
        trigger = Trigger(id="boot", check=lambda s: True)
        agent = Agent(AgentConfig(triggers=[trigger]))
        assert agent.get_trigger("boot") is trigger


class TestAgentState:
    """Tests for state access through the agent."""

    def test_get_and_set_state(self):
        agent = make_agent({"a": 1})
        agent.set_state({"a": 2})
        assert agent.get_state() == {"a": 2}

    def test_subscribe(self):
        agent = make_agent({"a": 1})
        seen = []

        unsubscribe = agent.subscribe(seen.append)
        agent.set_state({"a": 2})
        unsubscribe()
        agent.set_state({"a": 3})

        assert seen == [{"a": 2}]


class TestAgentTriggers:
    """Tests for trigger management and firing."""

    def test_trigger_crud(self):
        agent = make_agent()
        agent.add_trigger(Trigger(id="t1", check=lambda s: True))
        agent.add_trigger(Trigger(id="t2", check=lambda s: True))

        with pytest.raises(DuplicateTriggerError):
            agent.add_trigger(Trigger(id="t1", check=lambda s: False))

        assert [t.id for t in agent.get_all_triggers()] == ["t1", "t2"]

        agent.remove_trigger("t1")
        with pytest.raises(TriggerNotFoundError):
            agent.remove_trigger("t1")

        agent.clear_triggers()
        assert agent.get_all_triggers() == []

    @pytest.mark.asyncio
    async def test_fires_on_initial_state(self):
        """Triggers matching the initial state fire without a set_state."""
        fired = []
        agent = make_agent({"ready": True})
        agent.when(lambda s: s["ready"], [lambda s: fired.append("ready")])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert fired == ["ready"]

    @pytest.mark.asyncio
    async def test_cascade_runs_until_quiet(self):
        """In-place mutations keep re-scanning until nothing matches."""
        agent = make_agent({"count": 1})
        agent.when(
            lambda s: 0 < s["count"] < 3,
            [lambda s: s.update(count=s["count"] + 1)],
        )

        await agent.start()
        agent.set_state({"count": 1})
        await agent.settle()
        await agent.stop()

        assert agent.get_state() == {"count": 3}

    @pytest.mark.asyncio
    async def test_settle_waits_for_slow_async_cascade(self):
        agent = make_agent({"count": 1})

        async def increment(state):
            await asyncio.sleep(0.05)
            state["count"] += 1

        agent.when(lambda s: 0 < s["count"] < 3, [increment])

        await agent.start()
        await agent.settle()
        count = agent.get_state()["count"]
        await agent.stop()

        assert count == 3

    @pytest.mark.asyncio
    async def test_repeating_trigger_fires_once_per_change(self):
        fired = []
        agent = make_agent({"go": False})
        agent.when(lambda s: s["go"], [lambda s: fired.append(1)])

        await agent.start()
        await agent.settle()
        assert fired == []

        agent.set_state({"go": True})
        await agent.settle()
        assert fired == [1]

        agent.set_state({"go": True})
        await agent.settle()
        await agent.stop()

        assert fired == [1, 1]

    @pytest.mark.asyncio
    async def test_conditions_guard_actions(self):
        fired = []
        agent = make_agent({"count": 5})
        agent.when(
            lambda s: True,
            [lambda s: s["count"] > 10],
            [lambda s: fired.append(s["count"])],
        )

        await agent.start()
        await agent.settle()
        assert fired == []

        agent.set_state({"count": 11})
        await agent.settle()
        await agent.stop()

        assert fired == [11]

    @pytest.mark.asyncio
    async def test_async_check_and_actions(self):
        agent = make_agent({"value": 2})

        async def has_value(state):
            await asyncio.sleep(0)
            return "doubled" not in state

        async def double(state):
            await asyncio.sleep(0)
            state["doubled"] = state["value"] * 2

        agent.when(has_value, [double])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert agent.get_state() == {"value": 2, "doubled": 4}

    @pytest.mark.asyncio
    async def test_once_fires_once_and_is_removed(self):
        fired = []
        agent = make_agent({"n": 0})
        trigger_id = agent.once(lambda s: True, [lambda s: fired.append(1)])

        await agent.start()
        await agent.settle()
        agent.set_state({"n": 1})
        await agent.settle()
        await agent.stop()

        assert fired == [1]
        assert agent.get_trigger(trigger_id) is None

    @pytest.mark.asyncio
    async def test_once_removed_even_when_action_fails(self):
        agent = make_agent(on_error=lambda e: None)

        def fail(state):
            raise RuntimeError("first and last")

        trigger_id = agent.once(lambda s: True, [fail])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert agent.get_trigger(trigger_id) is None

    @pytest.mark.asyncio
    async def test_delay_before_actions(self):
        loop = asyncio.get_running_loop()
        times = []
        agent = make_agent()
        agent.add_trigger(
            Trigger(
                id="slow",
                check=lambda s: True,
                actions=[lambda s: times.append(loop.time())],
                delay=0.05,
            )
        )

        started = loop.time()
        await agent.start()
        await agent.settle()
        await agent.stop()

        assert len(times) == 1
        assert times[0] - started >= 0.05

    def test_generated_ids(self):
        agent = make_agent()
        first = agent.when(lambda s: True, [])
        second = agent.once(lambda s: True, [])
        third = agent.on("save", [])

        ids = [first, second, third]
        assert all(i.startswith(GENERATED_ID_PREFIX) for i in ids)
        assert len(set(ids)) == 3

    def test_generated_ids_skip_caller_ids(self):
        agent = make_agent()
        agent.add_trigger(Trigger(id=f"{GENERATED_ID_PREFIX}1", check=lambda s: True))

        generated = agent.when(lambda s: True, [])

        assert generated == f"{GENERATED_ID_PREFIX}2"
        assert len(agent.get_all_triggers()) == 2

    def test_builder_overloads(self):
        agent = make_agent()
        action = lambda s: None  # noqa: E731
        condition = lambda s: True  # noqa: E731

        plain = agent.get_trigger(agent.when(lambda s: True, [action]))
        guarded = agent.get_trigger(agent.when(lambda s: True, [condition], [action]))

        assert plain.conditions is None
        assert list(plain.actions) == [action]
        assert list(guarded.conditions) == [condition]
        assert list(guarded.actions) == [action]
        assert plain.repeat is True


class TestAgentErrors:
    """Tests for error reporting."""

    @pytest.mark.asyncio
    async def test_action_errors_reported_in_order(self):
        errors = []
        ran = []
        agent = make_agent(on_error=errors.append)

        def fail_one(state):
            raise ValueError("one")

        def fail_two(state):
            raise KeyError("two")

        agent.when(lambda s: True, [fail_one, lambda s: ran.append(1), fail_two])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert ran == [1]
        assert [type(e) for e in errors] == [ValueError, KeyError]

    @pytest.mark.asyncio
    async def test_check_error_reported_and_other_triggers_run(self):
        errors = []
        fired = []
        agent = make_agent(on_error=errors.append)

        def broken_check(state):
            raise RuntimeError("bad check")

        agent.when(broken_check, [lambda s: fired.append("broken")])
        agent.when(lambda s: True, [lambda s: fired.append("healthy")])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert fired == ["healthy"]
        assert len(errors) == 1
        assert str(errors[0]) == "bad check"

    @pytest.mark.asyncio
    async def test_condition_errors_are_not_reported(self):
        errors = []
        agent = make_agent(on_error=errors.append)

        def broken_condition(state):
            raise RuntimeError("ignored")

        agent.when(lambda s: True, [broken_condition], [lambda s: None])

        await agent.start()
        await agent.settle()
        await agent.stop()

        assert errors == []

    @pytest.mark.asyncio
    async def test_errors_logged_without_handler(self, caplog):
        agent = make_agent()

        def fail(state):
            raise RuntimeError("nobody listening")

        agent.when(lambda s: True, [fail])

        with caplog.at_level(logging.ERROR, logger="agentiny.agent"):
            await agent.start()
            await agent.settle()
            await agent.stop()

        assert "nobody listening" in caplog.text

    @pytest.mark.asyncio
    async def test_raising_handler_does_not_stop_loop(self):
        fired = []

        def bad_handler(error):
            raise RuntimeError("handler broke")

        agent = make_agent({"go": False}, on_error=bad_handler)

        def fail(state):
            raise ValueError("x")

        agent.when(lambda s: True, [fail])
        agent.when(lambda s: s["go"], [lambda s: fired.append(1)])

        await agent.start()
        await agent.settle()
        agent.set_state({"go": True})
        await agent.settle()
        await agent.stop()

        assert fired == [1]


class TestAgentEvents:
    """Tests for event triggers."""

    @pytest.mark.asyncio
    async def test_each_listener_fires_once_per_emit(self):
        fired = []
        agent = make_agent()
        agent.on("x", [lambda s: fired.append("a")])
        agent.on("x", [lambda s: fired.append("b")])

        await agent.start()
        await agent.settle()
        assert fired == []

        agent.emit_event("x")
        await agent.settle()
        assert sorted(fired) == ["a", "b"]

        agent.emit_event("x")
        await agent.settle()
        await agent.stop()

        assert sorted(fired) == ["a", "a", "b", "b"]

    @pytest.mark.asyncio
    async def test_past_emissions_not_replayed(self):
        fired = []
        agent = make_agent({"n": 0})

        await agent.start()
        agent.emit_event("save")
        await agent.settle()

        agent.on("save", [lambda s: fired.append(1)])
        agent.set_state({"n": 1})
        await agent.settle()
        assert fired == []

        agent.emit_event("save")
        await agent.settle()
        await agent.stop()

        assert fired == [1]

    @pytest.mark.asyncio
    async def test_on_without_repeat_fires_once(self):
        fired = []
        agent = make_agent()
        trigger_id = agent.on("boot", [lambda s: fired.append(1)], False)

        await agent.start()
        agent.emit_event("boot")
        await agent.settle()
        agent.emit_event("boot")
        await agent.settle()
        await agent.stop()

        assert fired == [1]
        assert agent.get_trigger(trigger_id) is None
        assert agent.get_event_triggers_for_event("boot") == []

    @pytest.mark.asyncio
    async def test_on_with_conditions(self):
        fired = []
        agent = make_agent({"armed": False})
        agent.on("fire", [lambda s: s["armed"]], [lambda s: fired.append(1)])

        await agent.start()
        agent.emit_event("fire")
        await agent.settle()
        assert fired == []

        agent.get_state()["armed"] = True
        agent.emit_event("fire")
        await agent.settle()
        await agent.stop()

        assert fired == [1]

    def test_on_overloads(self):
        agent = make_agent()
        action = lambda s: None  # noqa: E731
        condition = lambda s: True  # noqa: E731

        one_shot = agent.get_trigger(agent.on("e", [action], False))
        guarded = agent.get_trigger(agent.on("e", [condition], [action]))
        guarded_once = agent.get_trigger(agent.on("e", [condition], [action], repeat=False))

        assert one_shot.repeat is False and one_shot.conditions is None
        assert guarded.repeat is True and list(guarded.conditions) == [condition]
        assert guarded_once.repeat is False

    def test_event_trigger_inspection(self):
        agent = make_agent()
        a = agent.on("save", [])
        b = agent.on("save", [])
        c = agent.on("load", [])

        assert [t.id for t in agent.get_event_triggers_for_event("save")] == [a, b]
        assert agent.get_event_triggers_for_event("unknown") == []

        agent.remove_event_trigger("load", c)
        triggers = agent.get_event_triggers()

        assert list(triggers) == ["save"]
        assert [t.id for t in triggers["save"]] == [a, b]

    def test_remove_all_event_triggers(self):
        agent = make_agent()
        agent.on("save", [])
        agent.on("save", [])
        keep = agent.when(lambda s: True, [])

        agent.remove_all_event_triggers_for_event("save")
        agent.remove_all_event_triggers_for_event("never-registered")

        assert [t.id for t in agent.get_all_triggers()] == [keep]
        assert agent.get_event_triggers() == {}

    def test_clear_triggers_drops_event_associations(self):
        agent = make_agent()
        agent.on("save", [])

        agent.clear_triggers()

        assert agent.get_event_triggers() == {}
        agent.remove_all_event_triggers_for_event("save")
