# PATH: execution/__init__.py
"""
RUNGUARD execution layer.

- state_machine: run lifecycle transitions
- kill_switch: process-wide stop latch
- budget_guard: token/USD limit checks
- event_log: append-only step record
- context: shared latch + log
- controller: the control loop and failure classification
"""

from execution.budget_guard import (
    add_cost,
    budget_usage_percent,
    check_limits,
    enforce_limits,
)
from execution.config import ControllerConfig, StepConfig, load_controller_config
from execution.context import ExecutionContext
from execution.controller import ExecutionController, classify_failure
from execution.event_log import EventLog
from execution.kill_switch import KillSwitch, KillSwitchTrigger
from execution.results import CheckResult, RunOutcome
from execution.state_machine import (
    VALID_TRANSITIONS,
    allowed_targets,
    can_transition,
    force_terminal,
    is_terminal,
    pause,
    resume,
    transition,
)
from execution.steps import FixedCostStepExecutor, StepExecutor, StepResult

__all__ = [
    # Budget guard
    "add_cost",
    "budget_usage_percent",
    "check_limits",
    "enforce_limits",
    # Config
    "ControllerConfig",
    "StepConfig",
    "load_controller_config",
    # Context / controller
    "ExecutionContext",
    "ExecutionController",
    "classify_failure",
    # Event log
    "EventLog",
    # Kill switch
    "KillSwitch",
    "KillSwitchTrigger",
    # Results
    "CheckResult",
    "RunOutcome",
    # State machine
    "VALID_TRANSITIONS",
    "allowed_targets",
    "can_transition",
    "force_terminal",
    "is_terminal",
    "pause",
    "resume",
    "transition",
    # Steps
    "FixedCostStepExecutor",
    "StepExecutor",
    "StepResult",
]
