# PATH: core/constants.py
"""
Constants for RUNGUARD.

Contains enums, defaults, and configuration constants shared by the
execution and replay layers.
"""

from decimal import Decimal
from enum import Enum
from typing import Final


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_MAX_STEPS: Final[int] = 10
DEFAULT_MAX_TOKENS: Final[int] = 400
DEFAULT_MAX_USD: Final[Decimal] = Decimal("0.5")

# Stand-in step executor cost
DEFAULT_STEP_TOKENS: Final[int] = 50
DEFAULT_STEP_COST_USD: Final[Decimal] = Decimal("0.1")

# Budget usage percentage at which a warning is logged
DEFAULT_WARN_AT_PERCENT: Final[int] = 80

DEFAULT_KILL_REASON: Final[str] = "Manual termination"

# Kill switch status only reports the most recent triggers
KILL_SWITCH_HISTORY_SIZE: Final[int] = 5


class RunState(str, Enum):
    """Lifecycle states of a run."""
    CREATED = "CREATED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    KILLED = "KILLED"
    FAILED = "FAILED"


TERMINAL_STATES: Final[frozenset[RunState]] = frozenset([
    RunState.COMPLETED,
    RunState.KILLED,
    RunState.FAILED,
])


class StepEventType(str, Enum):
    """Categories of recorded step events."""
    LLM_CALL = "LLM_CALL"
    TOOL_CALL = "TOOL_CALL"
    DECISION = "DECISION"
    ERROR = "ERROR"


class BudgetKind(str, Enum):
    """Budget dimension that tripped the guard."""
    TOKENS = "tokens"
    USD = "usd"


class ErrorCode(str, Enum):
    """
    Error codes for controlled failures.

    Every ControllerError subclass carries exactly one of these.
    """
    BUDGET_EXCEEDED = "BUDGET_EXCEEDED"
    KILL_SWITCH_TRIGGERED = "KILL_SWITCH_TRIGGERED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    UNKNOWN = "UNKNOWN"
