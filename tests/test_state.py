"""Tests for the reactive State container."""

import logging

from agentiny.state import State, compute_fingerprint


class TestState:
    """Tests for State."""

    def test_get_returns_initial_value(self):
        state = State({"count": 0})
        assert state.get() == {"count": 0}

    def test_set_replaces_value(self):
        state = State(1)
        state.set(2)
        assert state.get() == 2

    def test_get_returns_live_object(self):
        """Mutations through get() are visible without set()."""
        state = State({"items": []})
        state.get()["items"].append("a")
        assert state.get() == {"items": ["a"]}

    def test_subscribers_called_in_order(self):
        state = State(0)
        seen = []

        state.subscribe(lambda v: seen.append(("first", v)))
        state.subscribe(lambda v: seen.append(("second", v)))
        state.set(5)

        assert seen == [("first", 5), ("second", 5)]

    def test_unsubscribe(self):
        state = State(0)
        seen = []

        unsubscribe = state.subscribe(seen.append)
        state.set(1)
        unsubscribe()
        state.set(2)

        assert seen == [1]
        assert state.subscriber_count == 0

    def test_unsubscribe_twice_is_harmless(self):
        state = State(0)
        unsubscribe = state.subscribe(lambda v: None)
        unsubscribe()
        unsubscribe()
        assert state.subscriber_count == 0

    def test_unsubscribe_only_removes_own_callback(self):
        """Subscribing the same callback twice yields independent handles."""
        state = State(0)
        seen = []

        unsubscribe_a = state.subscribe(seen.append)
        state.subscribe(seen.append)
        unsubscribe_a()
        state.set(3)

        assert seen == [3]

    def test_failing_subscriber_does_not_block_others(self, caplog):
        state = State(0)
        seen = []

        def broken(value):
            raise RuntimeError("boom")

        state.subscribe(broken)
        state.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="agentiny.state"):
            state.set(7)

        assert seen == [7]
        assert state.get() == 7
        assert "Error in state subscriber" in caplog.text


class TestComputeFingerprint:
    """Tests for compute_fingerprint."""

    def test_key_order_does_not_matter(self):
        assert compute_fingerprint({"a": 1, "b": 2}) == compute_fingerprint({"b": 2, "a": 1})

    def test_detects_nested_change(self):
        value = {"items": [1, 2]}
        before = compute_fingerprint(value)
        value["items"].append(3)
        assert compute_fingerprint(value) != before

    def test_unserializable_keys_return_none(self):
        assert compute_fingerprint({(1, 2): "tuple key"}) is None
