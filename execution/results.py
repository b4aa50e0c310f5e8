# PATH: execution/results.py
"""
Tagged results for guard checks and whole runs.

Checks return a CheckResult instead of raising, so the control loop can
short-circuit on the first failure and hand it to the classifier.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.constants import ErrorCode, RunState
from core.exceptions import ControllerError
from core.models import Run


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single guard check."""
    ok: bool
    error: Optional[ControllerError] = None

    @classmethod
    def passed(cls) -> "CheckResult":
        return _PASSED

    @classmethod
    def failed(cls, error: ControllerError) -> "CheckResult":
        return cls(ok=False, error=error)

    @property
    def code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error is not None else None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


_PASSED = CheckResult(ok=True)


@dataclass(frozen=True)
class RunOutcome:
    """
    Result of ExecutionController.execute().

    `error` is the failure that ended the run (a ControllerError or any
    exception raised by the step executor); None when the run completed.
    """
    run: Run
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def final_state(self) -> RunState:
        return self.run.state

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.error, ControllerError):
            error = self.error.to_dict()
        elif self.error is not None:
            error = {"code": ErrorCode.UNKNOWN.value, "name": type(self.error).__name__, "message": str(self.error)}
        else:
            error = None
        return {
            "run_id": self.run.id,
            "ok": self.ok,
            "final_state": self.final_state.value,
            "error": error,
        }
