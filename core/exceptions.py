# PATH: core/exceptions.py
"""
Typed exceptions for RUNGUARD.

All controlled failures derive from ControllerError and carry an ErrorCode
plus structured details so a failed run can be explained from its record.
"""

from decimal import Decimal
from typing import Any, Dict, Optional, Union

from core.constants import BudgetKind, DEFAULT_KILL_REASON, ErrorCode, RunState
from core.time import now_ms


class ControllerError(Exception):
    """Base exception for controlled execution failures."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = now_ms()

    def __str__(self):
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "name": type(self).__name__,
            "message": self.message,
            "timestamp": self.timestamp,
            "details": {k: str(v) if isinstance(v, Decimal) else v for k, v in self.details.items()},
        }


class BudgetExceeded(ControllerError):
    """Token or USD spend went over the run's budget."""

    code = ErrorCode.BUDGET_EXCEEDED

    def __init__(
        self,
        kind: Union[BudgetKind, str],
        spent: Union[int, Decimal],
        limit: Union[int, Decimal],
    ):
        self.kind = BudgetKind(kind)
        self.spent = spent
        self.limit = limit
        label = "Token" if self.kind == BudgetKind.TOKENS else "Cost"
        super().__init__(
            f"{label} budget exceeded: spent {spent}, limit {limit}",
            {"kind": self.kind.value, "spent": spent, "limit": limit},
        )


class KillSwitchTriggered(ControllerError):
    """The kill switch was triggered before a step could start."""

    code = ErrorCode.KILL_SWITCH_TRIGGERED

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or DEFAULT_KILL_REASON
        super().__init__(
            f"Execution terminated by kill switch: {self.reason}",
            {"reason": self.reason},
        )


class InvalidTransition(ControllerError):
    """A lifecycle transition not present in the transition table."""

    code = ErrorCode.INVALID_STATE_TRANSITION

    def __init__(self, from_state: RunState, to_state: RunState):
        self.from_state = RunState(from_state)
        self.to_state = RunState(to_state)
        super().__init__(
            f"Invalid state transition: {self.from_state.value} -> {self.to_state.value}",
            {"from": self.from_state.value, "to": self.to_state.value},
        )
