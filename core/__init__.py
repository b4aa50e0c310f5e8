"""
core - Core utilities and models for RUNGUARD.

This package contains:
- models.py: Run, Budget, Spend, StepEvent
- constants.py: Enums and defaults
- exceptions.py: Typed controller errors with error codes
- time.py: Clocks and epoch-millisecond helpers
- logging.py: Structured JSON logging
- format_money.py: Decimal-safe USD formatting
"""

from core.constants import (
    BudgetKind,
    ErrorCode,
    RunState,
    StepEventType,
    TERMINAL_STATES,
)
from core.exceptions import (
    BudgetExceeded,
    ControllerError,
    InvalidTransition,
    KillSwitchTriggered,
)
from core.logging import get_logger, setup_logging
from core.models import (
    Budget,
    Run,
    Spend,
    StepEvent,
    create_run,
)
from core.time import Clock, FixedClock, SystemClock

__all__ = [
    # Constants
    "BudgetKind",
    "ErrorCode",
    "RunState",
    "StepEventType",
    "TERMINAL_STATES",
    # Exceptions
    "BudgetExceeded",
    "ControllerError",
    "InvalidTransition",
    "KillSwitchTriggered",
    # Models
    "Budget",
    "Run",
    "Spend",
    "StepEvent",
    "create_run",
    # Time
    "Clock",
    "FixedClock",
    "SystemClock",
    # Logging
    "get_logger",
    "setup_logging",
]
