# PATH: replay/formatter.py
"""
Display formatting for events and summaries.

Formatting has no bearing on control flow; any object with the
EventFormatter methods can replace TextFormatter.
"""

from typing import TYPE_CHECKING, List, Protocol

from core.format_money import format_usd
from core.models import StepEvent
from core.time import ms_to_iso

if TYPE_CHECKING:
    from replay.history import RunSummary


RULE = "=" * 60


class EventFormatter(Protocol):
    def format_event(self, event: StepEvent) -> str:
        ...

    def format_summary(self, summary: "RunSummary") -> List[str]:
        ...


class TextFormatter:
    """Plain-text, one line per event."""

    def format_event(self, event: StepEvent) -> str:
        return (
            f"[#{event.step_number:03d}] {ms_to_iso(event.timestamp)} "
            f"{event.type.value:<9} | {event.description} | "
            f"{event.tokens} tokens | {format_usd(event.cost)}"
        )

    def format_summary(self, summary: "RunSummary") -> List[str]:
        return [
            RULE,
            "EXECUTION SUMMARY",
            RULE,
            f"Run ID:             {summary.run_id}",
            f"Final State:        {summary.final_state.value}",
            f"Steps Executed:     {summary.steps_executed}",
            f"Total Tokens:       {summary.total_tokens}",
            f"Total Cost:         {format_usd(summary.total_cost)}",
            f"Duration:           {summary.duration_ms}ms",
            f"Termination Reason: {summary.termination_reason or 'None'}",
            RULE,
        ]
