"""Replay and summary of recorded runs."""

from replay.formatter import EventFormatter, TextFormatter
from replay.history import (
    EventSummary,
    RunSummary,
    replay,
    replay_to,
    summarize,
    summarize_run,
)

__all__ = [
    "EventFormatter",
    "TextFormatter",
    "EventSummary",
    "RunSummary",
    "replay",
    "replay_to",
    "summarize",
    "summarize_run",
]
