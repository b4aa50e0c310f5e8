# PATH: execution/event_log.py
"""
Append-only event log.

The authoritative record of every successful step across runs. There is
no update or delete: every recorded fact stays observable exactly as
recorded. clear() exists for bootstrap and tests only.
"""

import threading
from typing import List

from core.models import StepEvent


class EventLog:
    """In-memory, ordered, append-only sequence of StepEvents."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: List[StepEvent] = []

    def append(self, event: StepEvent) -> None:
        if not isinstance(event, StepEvent):
            raise TypeError(f"EventLog accepts StepEvent, got {type(event).__name__}")
        with self._lock:
            self._events.append(event)

    def all(self) -> List[StepEvent]:
        """Snapshot copy; mutating it does not affect the log."""
        with self._lock:
            return list(self._events)

    def for_run(self, run_id: str) -> List[StepEvent]:
        with self._lock:
            return [e for e in self._events if e.run_id == run_id]

    def count(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return self.count()
