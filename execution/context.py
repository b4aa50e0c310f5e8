# PATH: execution/context.py
"""
Execution context.

Owns the kill switch and the event log. Construct one per process (or per
test) and pass it to every controller that should share the latch and log.
"""

from typing import List, Optional

from core.models import StepEvent
from core.time import Clock, SystemClock
from execution.event_log import EventLog
from execution.kill_switch import KillSwitch


class ExecutionContext:
    """Shared latch + log for all runs in a process."""

    def __init__(
        self,
        kill_switch: Optional[KillSwitch] = None,
        event_log: Optional[EventLog] = None,
        clock: Optional[Clock] = None,
    ):
        self.clock = clock or SystemClock()
        self.kill_switch = kill_switch or KillSwitch(clock=self.clock)
        self.event_log = event_log if event_log is not None else EventLog()

    def get_events(self) -> List[StepEvent]:
        return self.event_log.all()

    def kill(self, reason: str) -> None:
        self.kill_switch.trigger(reason)

    def reset_kill_switch(self) -> None:
        self.kill_switch.reset()

    def clear_events(self) -> None:
        self.event_log.clear()
