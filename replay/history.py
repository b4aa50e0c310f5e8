# PATH: replay/history.py
"""
Replay and summary of recorded runs.

Everything here is a pure consumer of the event log and run record:
nothing is mutated, and the same ordered events always produce the same
output.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.constants import RunState
from core.models import Run, StepEvent
from core.time import Clock, SystemClock
from replay.formatter import EventFormatter, TextFormatter


@dataclass(frozen=True)
class EventSummary:
    """Aggregate statistics over a sequence of events."""
    count: int
    total_cost: Decimal
    total_tokens: int
    count_by_type: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_cost": str(self.total_cost),
            "total_tokens": self.total_tokens,
            "count_by_type": dict(self.count_by_type),
        }


@dataclass(frozen=True)
class RunSummary:
    """Final figures for a run."""
    run_id: str
    final_state: RunState
    steps_executed: int
    total_cost: Decimal
    total_tokens: int
    termination_reason: Optional[str]
    duration_ms: int
    started_at: int
    ended_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "final_state": self.final_state.value,
            "steps_executed": self.steps_executed,
            "total_cost": str(self.total_cost),
            "total_tokens": self.total_tokens,
            "termination_reason": self.termination_reason,
            "duration_ms": self.duration_ms,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
        }


def replay(events: Iterable[StepEvent], formatter: Optional[EventFormatter] = None) -> List[str]:
    """
    Render each event, in the order given.

    Returns:
        One line per event; empty list for no events
    """
    formatter = formatter or TextFormatter()
    return [formatter.format_event(event) for event in events]


def replay_to(
    events: Iterable[StepEvent],
    echo: Callable[[str], Any],
    formatter: Optional[EventFormatter] = None,
) -> int:
    """
    Write a replay through `echo` (print, click.echo, a logger method...).

    Returns:
        Number of events replayed
    """
    lines = replay(events, formatter)
    if not lines:
        echo("No events to replay.")
        return 0

    echo(f"Replaying {len(lines)} events:")
    for line in lines:
        echo(line)
    return len(lines)


def summarize(events: Iterable[StepEvent]) -> EventSummary:
    """Fold events into counts and totals in a single pass."""
    count = 0
    total_cost = Decimal("0")
    total_tokens = 0
    by_type: Counter = Counter()

    for event in events:
        count += 1
        total_cost += event.cost
        total_tokens += event.tokens
        by_type[event.type.value] += 1

    return EventSummary(
        count=count,
        total_cost=total_cost,
        total_tokens=total_tokens,
        count_by_type=dict(by_type),
    )


def summarize_run(run: Run, clock: Optional[Clock] = None) -> RunSummary:
    """
    Summarize a run record.

    Unset timestamps fall back to the current time, so a run that never
    started reports a zero duration and a live run reports time so far.
    """
    now = (clock or SystemClock()).now_ms()
    started_at = run.started_at if run.started_at is not None else now
    ended_at = run.ended_at if run.ended_at is not None else now

    return RunSummary(
        run_id=run.id,
        final_state=run.state,
        steps_executed=len(run.steps),
        total_cost=run.spent.usd,
        total_tokens=run.spent.tokens,
        termination_reason=run.termination_reason,
        duration_ms=max(0, ended_at - started_at),
        started_at=started_at,
        ended_at=ended_at,
    )
