# PATH: execution/kill_switch.py
"""
Kill switch for emergency execution stop.

A single latch, checked before every step. Once triggered, every check
fails with the trigger reason until an administrative reset.

Triggered from another thread (operator, monitor) the latch is observed by
the next step check; the lock gives that visibility.
"""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional

from core.constants import DEFAULT_KILL_REASON, KILL_SWITCH_HISTORY_SIZE
from core.exceptions import KillSwitchTriggered
from core.logging import get_logger
from core.time import Clock, SystemClock, ms_to_iso
from execution.results import CheckResult

logger = get_logger("runguard.kill_switch", component="kill_switch")


@dataclass(frozen=True)
class KillSwitchTrigger:
    """Kill switch trigger event."""
    timestamp: int
    reason: str


class KillSwitch:
    """Process-wide stop latch."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._killed = False
        self._reason: Optional[str] = None
        self._triggers: Deque[KillSwitchTrigger] = deque(maxlen=KILL_SWITCH_HISTORY_SIZE)

    def trigger(self, reason: str = DEFAULT_KILL_REASON) -> None:
        """Trigger the kill switch. Re-triggering overwrites the reason."""
        with self._lock:
            self._killed = True
            self._reason = reason
            self._triggers.append(KillSwitchTrigger(timestamp=self._clock.now_ms(), reason=reason))
        logger.warning("Kill switch triggered", extra={"context": {"reason": reason}})

    def is_triggered(self) -> bool:
        with self._lock:
            return self._killed

    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason

    def check(self) -> CheckResult:
        """Tagged form of assert_alive()."""
        with self._lock:
            if not self._killed:
                return CheckResult.passed()
            reason = self._reason
        return CheckResult.failed(KillSwitchTriggered(reason))

    def assert_alive(self) -> None:
        """Raise KillSwitchTriggered if the latch is set."""
        self.check().raise_for_error()

    def reset(self) -> None:
        """Clear the latch. Administrative/test use only, never mid-run."""
        with self._lock:
            was_killed = self._killed
            self._killed = False
            self._reason = None
        if was_killed:
            logger.info("Kill switch reset")

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "killed": self._killed,
                "reason": self._reason,
                "triggers": [
                    {"timestamp": ms_to_iso(t.timestamp), "reason": t.reason}
                    for t in self._triggers
                ],
            }
