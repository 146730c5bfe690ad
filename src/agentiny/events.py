"""Event ledger for agentiny.

Tracks how many times each event was emitted and how far each event
trigger has read. A trigger fires when the emission counter is ahead of
its watermark, so several emissions between two polls are never lost and
every trigger on the same event sees them independently.
"""

import threading


class EventLedger:
    """Emission counters, per-trigger watermarks and event associations.

    Example:
        ledger = EventLedger()
        ledger.bind("save", "t1")

        ledger.emit("save")
        ledger.observe("save", "t1")  # True
        ledger.observe("save", "t1")  # False until the next emit
    """

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._watermarks: dict[str, dict[str, int]] = {}
        self._associations: dict[str, dict[str, None]] = {}
        self._lock = threading.RLock()

    def emit(self, event: str) -> int:
        """Record one emission of ``event``.

        Returns:
            The new emission count.
        """
        with self._lock:
            count = self._counts.get(event, 0) + 1
            self._counts[event] = count
            return count

    def count(self, event: str) -> int:
        """Number of emissions of ``event`` since the last reset."""
        with self._lock:
            return self._counts.get(event, 0)

    def watermark(self, event: str, trigger_id: str) -> int:
        """Last emission count observed by a trigger."""
        with self._lock:
            return self._watermarks.get(event, {}).get(trigger_id, 0)

    def bind(self, event: str, trigger_id: str) -> None:
        """Associate a trigger with an event.

        The watermark starts at the current count, so emissions that
        happened before the trigger existed are not replayed to it.
        """
        with self._lock:
            self._associations.setdefault(event, {})[trigger_id] = None
            self._watermarks.setdefault(event, {})[trigger_id] = self._counts.get(event, 0)

    def observe(self, event: str, trigger_id: str) -> bool:
        """Check for unseen emissions and advance the watermark.

        Returns:
            True if ``event`` was emitted since the trigger last observed it.
        """
        with self._lock:
            current = self._counts.get(event, 0)
            seen = self._watermarks.setdefault(event, {})
            if current > seen.get(trigger_id, 0):
                seen[trigger_id] = current
                return True
            return False

    def forget(self, trigger_id: str) -> None:
        """Drop a trigger from every association and watermark."""
        with self._lock:
            for watermarks in self._watermarks.values():
                watermarks.pop(trigger_id, None)
            for event in list(self._associations):
                trigger_ids = self._associations[event]
                trigger_ids.pop(trigger_id, None)
                if not trigger_ids:
                    del self._associations[event]

    def trigger_ids(self, event: str) -> list[str]:
        """Trigger ids associated with ``event``, in binding order."""
        with self._lock:
            return list(self._associations.get(event, {}))

    def associations(self) -> dict[str, list[str]]:
        """Snapshot of every event and its trigger ids."""
        with self._lock:
            return {event: list(ids) for event, ids in self._associations.items()}

    def reset_counts(self) -> None:
        """Reset emission counters and watermarks, keeping associations."""
        with self._lock:
            self._counts.clear()
            self._watermarks.clear()

    def clear(self) -> None:
        """Drop associations and watermarks, keeping emission counters."""
        with self._lock:
            self._associations.clear()
            self._watermarks.clear()
