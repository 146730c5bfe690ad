"""Trigger registry for agentiny."""

import threading

from .events import EventLedger
from .exceptions import DuplicateTriggerError, TriggerNotFoundError
from .types import Trigger


class TriggerRegistry:
    """Id-keyed trigger store, iterated in insertion order.

    Removing a trigger also purges it from the event ledger, so no event
    association can point at a trigger that no longer exists.

    Example:
        registry = TriggerRegistry()
        registry.add(Trigger(id="t1", check=lambda s: True))

        registry.get("t1")     # the trigger
        registry.remove("t1")
        registry.remove("t1")  # raises TriggerNotFoundError
    """

    def __init__(self, ledger: EventLedger | None = None):
        """Initialize the registry.

        Args:
            ledger: Event ledger to purge on removal. A private one is
                created when omitted.
        """
        self._triggers: dict[str, Trigger] = {}
        self._ledger = ledger or EventLedger()
        self._lock = threading.RLock()

    @property
    def ledger(self) -> EventLedger:
        return self._ledger

    def add(self, trigger: Trigger) -> None:
        """Register a trigger.

        Raises:
            DuplicateTriggerError: If the id is already registered.
        """
        with self._lock:
            if trigger.id in self._triggers:
                raise DuplicateTriggerError(trigger.id)
            self._triggers[trigger.id] = trigger

    def get(self, trigger_id: str) -> Trigger | None:
        """Get a trigger by id."""
        with self._lock:
            return self._triggers.get(trigger_id)

    def has(self, trigger_id: str) -> bool:
        with self._lock:
            return trigger_id in self._triggers

    def get_all(self) -> list[Trigger]:
        """Snapshot of all triggers in insertion order."""
        with self._lock:
            return list(self._triggers.values())

    def remove(self, trigger_id: str) -> None:
        """Remove a trigger and its event bookkeeping.

        Raises:
            TriggerNotFoundError: If the id is not registered.
        """
        with self._lock:
            if trigger_id not in self._triggers:
                raise TriggerNotFoundError(trigger_id)
            del self._triggers[trigger_id]
            self._ledger.forget(trigger_id)

    def clear(self) -> None:
        """Remove every trigger and every event association."""
        with self._lock:
            self._triggers.clear()
            self._ledger.clear()

    def __contains__(self, trigger_id: object) -> bool:
        return isinstance(trigger_id, str) and self.has(trigger_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._triggers)
