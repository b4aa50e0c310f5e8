# PATH: core/time.py
"""
Time utilities for RUNGUARD.

Timestamps are Unix epoch milliseconds. Components take a Clock so tests
and replays can pin time.
"""

import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in epoch milliseconds."""

    def now_ms(self) -> int:
        ...


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def ms_to_iso(timestamp_ms: int) -> str:
    """Render an epoch-milliseconds timestamp as an ISO 8601 UTC string."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")


class SystemClock:
    """Wall-clock time."""

    def now_ms(self) -> int:
        return now_ms()


class FixedClock:
    """
    Deterministic clock for tests and replays.

    Returns `start_ms` and advances by `step_ms` on every read.
    """

    def __init__(self, start_ms: int = 1_700_000_000_000, step_ms: int = 0):
        self._current = start_ms
        self._step = step_ms

    def now_ms(self) -> int:
        value = self._current
        self._current += self._step
        return value
