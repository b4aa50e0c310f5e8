# PATH: execution/state_machine.py
"""
Run lifecycle state machine.

RUN STATE CONTRACT:
===================

States (RunState):
  CREATED    → run created, not yet started
  RUNNING    → control loop is executing steps
  PAUSED     → temporarily halted, may resume
  COMPLETED  → all steps done
  KILLED     → stopped by the kill switch
  FAILED     → stopped by a guard or step failure

Transitions:
  CREATED → RUNNING
  RUNNING → PAUSED | COMPLETED | KILLED | FAILED
  PAUSED  → RUNNING | KILLED

Timestamps:
  started_at  set on the first entry into RUNNING
  ended_at    set on the first entry into a terminal state

transition() is the only way the control loop changes run.state.
force_terminal() exists solely for failure classification.
===================
"""

from typing import Dict, FrozenSet, Optional

from core.constants import RunState, TERMINAL_STATES
from core.exceptions import InvalidTransition
from core.models import Run
from core.time import Clock, SystemClock


VALID_TRANSITIONS: Dict[RunState, FrozenSet[RunState]] = {
    RunState.CREATED: frozenset([RunState.RUNNING]),
    RunState.RUNNING: frozenset([
        RunState.PAUSED,
        RunState.COMPLETED,
        RunState.KILLED,
        RunState.FAILED,
    ]),
    RunState.PAUSED: frozenset([RunState.RUNNING, RunState.KILLED]),
    RunState.COMPLETED: frozenset(),  # Terminal state
    RunState.KILLED: frozenset(),  # Terminal state
    RunState.FAILED: frozenset(),  # Terminal state
}

_default_clock = SystemClock()


def allowed_targets(state: RunState) -> FrozenSet[RunState]:
    return VALID_TRANSITIONS.get(state, frozenset())


def can_transition(state: RunState, target: RunState) -> bool:
    """Check if state -> target is in the transition table."""
    return target in allowed_targets(state)


def is_terminal(state: RunState) -> bool:
    return state in TERMINAL_STATES


def transition(run: Run, target: RunState, clock: Optional[Clock] = None) -> None:
    """
    Move a run to `target`.

    Raises InvalidTransition (leaving the run untouched) if the edge is not
    in VALID_TRANSITIONS.
    """
    if not can_transition(run.state, target):
        raise InvalidTransition(run.state, target)

    clock = clock or _default_clock
    run.state = target

    if target == RunState.RUNNING and run.started_at is None:
        run.started_at = clock.now_ms()

    if is_terminal(target):
        run.ended_at = clock.now_ms()


def pause(run: Run, clock: Optional[Clock] = None) -> None:
    transition(run, RunState.PAUSED, clock)


def resume(run: Run, clock: Optional[Clock] = None) -> None:
    transition(run, RunState.RUNNING, clock)


def force_terminal(run: Run, target: RunState, clock: Optional[Clock] = None) -> None:
    """
    Put a non-terminal run into a terminal state, bypassing the table.

    Used by failure classification, which must be able to end a run from
    any live state (e.g. PAUSED -> FAILED). Terminal runs are never rewritten.
    """
    if not is_terminal(target) or is_terminal(run.state):
        raise InvalidTransition(run.state, target)

    run.state = target
    if run.ended_at is None:
        run.ended_at = (clock or _default_clock).now_ms()
