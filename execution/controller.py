# PATH: execution/controller.py
"""
Execution controller.

Every step goes through, strictly in order:
  1. Kill switch check (can we continue?)
  2. Step execution (do the work)
  3. Cost accumulation (always, even if the step turns out over budget)
  4. Budget check (should we stop?)
  5. Event logging (record what happened)

Step n+1 never starts before step n's cost is recorded and its budget
check resolved. The first failing check ends the loop; the failure is
classified exactly once into KILLED or FAILED and handed back to the
caller (as a RunOutcome from execute(), raised from run()).
"""

from typing import List, Optional, Set

from core.constants import DEFAULT_KILL_REASON, RunState
from core.exceptions import ControllerError, KillSwitchTriggered
from core.format_money import format_pct
from core.logging import get_logger
from core.models import Run, StepEvent, new_event_id
from core.time import Clock
from execution.budget_guard import add_cost, budget_usage_percent, check_limits
from execution.config import ControllerConfig
from execution.context import ExecutionContext
from execution.kill_switch import KillSwitch
from execution.results import RunOutcome
from execution.state_machine import force_terminal, is_terminal, transition
from execution.steps import FixedCostStepExecutor, StepExecutor, as_step_result
from replay.history import RunSummary, summarize_run

logger = get_logger("runguard.controller", component="controller")


def classify_failure(
    run: Run,
    error: BaseException,
    kill_switch: KillSwitch,
    clock: Optional[Clock] = None,
) -> RunState:
    """
    Drive a failed run to its terminal state and record why it ended.

    An active kill switch wins over the error's own classification.
    KillSwitchTriggered -> KILLED; any other error, recognized or not,
    -> FAILED. A run that is already terminal is left as recorded.

    Returns:
        The run's resulting state
    """
    if is_terminal(run.state):
        logger.warning(
            "Failure reported for a finished run; record left unchanged",
            extra={"context": {"run_id": run.id, "state": run.state.value, "error": str(error)}},
        )
        return run.state

    if kill_switch.is_triggered():
        target = RunState.KILLED
        reason = kill_switch.reason() or DEFAULT_KILL_REASON
    elif isinstance(error, KillSwitchTriggered):
        target = RunState.KILLED
        reason = str(error)
    else:
        target = RunState.FAILED
        reason = str(error) or type(error).__name__

    force_terminal(run, target, clock)
    run.termination_reason = reason
    return target


class ExecutionController:
    """
    Runs a Run through its lifecycle under the guards of an ExecutionContext.

    Args:
        context: Shared kill switch + event log (a fresh one by default)
        executor: Unit of work per step (fixed-cost stand-in by default)
        clock: Time source for lifecycle and event timestamps
        config: Step limit, warning threshold and stand-in step cost
    """

    def __init__(
        self,
        context: Optional[ExecutionContext] = None,
        executor: Optional[StepExecutor] = None,
        clock: Optional[Clock] = None,
        config: Optional[ControllerConfig] = None,
    ):
        self.config = config or ControllerConfig()
        self.context = context or ExecutionContext(clock=clock)
        self.clock = clock or self.context.clock
        self.executor = executor or FixedCostStepExecutor(
            tokens=self.config.step.tokens,
            cost=self.config.step.cost,
            event_type=self.config.step.type,
        )

    def run(self, run: Run, max_steps: Optional[int] = None) -> RunOutcome:
        """
        Execute up to `max_steps` steps.

        Raises:
            InvalidTransition: run is not CREATED (run left untouched)
            KillSwitchTriggered, BudgetExceeded, or the step executor's own
            exception: after the run has been classified as KILLED/FAILED.
            Interrupts (KeyboardInterrupt, SystemExit) are classified too and
            propagate from execute() as well.
        """
        outcome = self.execute(run, max_steps)
        if outcome.error is not None:
            raise outcome.error
        return outcome

    def execute(self, run: Run, max_steps: Optional[int] = None) -> RunOutcome:
        """Like run(), but returns the failure in the RunOutcome instead of raising."""
        if max_steps is None:
            max_steps = self.config.max_steps
        if max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")

        transition(run, RunState.RUNNING, self.clock)
        logger.info(
            "Run started",
            extra={"context": {
                "run_id": run.id,
                "max_steps": max_steps,
                "max_tokens": run.budget.max_tokens,
                "max_usd": str(run.budget.max_usd),
            }},
        )

        warned: Set[str] = set()
        for step_number in range(1, max_steps + 1):
            try:
                error = self._execute_step(run, step_number)
            except BaseException as e:
                # Bookkeeping failures and interrupts still leave the run terminal
                self._terminate(run, e, step_number)
                if not isinstance(e, Exception):
                    raise
                return RunOutcome(run=run, error=e)
            if error is not None:
                self._terminate(run, error, step_number)
                return RunOutcome(run=run, error=error)
            self._warn_on_usage(run, warned)

        transition(run, RunState.COMPLETED, self.clock)
        logger.info(
            "Run completed",
            extra={"context": {
                "run_id": run.id,
                "steps": len(run.steps),
                "tokens": run.spent.tokens,
                "usd": str(run.spent.usd),
            }},
        )
        return RunOutcome(run=run)

    def _execute_step(self, run: Run, step_number: int) -> Optional[BaseException]:
        """Run one step; return the failure that should end the run, if any."""
        check = self.context.kill_switch.check()
        if not check.ok:
            return check.error

        try:
            result = as_step_result(self.executor(step_number))
            add_cost(run, result.tokens, result.cost)
        except Exception as e:
            logger.error(
                f"Step {step_number} failed: {e}",
                extra={"context": {"run_id": run.id, "step_number": step_number}},
                exc_info=True,
            )
            return e

        check = check_limits(run)
        if not check.ok:
            return check.error

        event = StepEvent(
            id=new_event_id(),
            run_id=run.id,
            step_number=step_number,
            type=result.type,
            description=result.description,
            cost=result.cost,
            tokens=result.tokens,
            timestamp=self.clock.now_ms(),
        )
        self.context.event_log.append(event)
        run.steps.append(event)

        logger.debug(
            "Step recorded",
            extra={"context": {
                "run_id": run.id,
                "step_number": step_number,
                "type": event.type.value,
                "tokens": event.tokens,
                "cost": str(event.cost),
            }},
        )
        return None

    def _terminate(self, run: Run, error: BaseException, step_number: int) -> None:
        state = self.handle_execution_error(run, error)
        logger.warning(
            "Run terminated",
            extra={"context": {
                "run_id": run.id,
                "state": state.value,
                "step_number": step_number,
                "reason": run.termination_reason,
                "error_code": error.code.value if isinstance(error, ControllerError) else None,
            }},
        )

    def _warn_on_usage(self, run: Run, warned: Set[str]) -> None:
        threshold = self.config.warn_at_percent
        if threshold <= 0:
            return
        for kind, percent in budget_usage_percent(run).items():
            if kind not in warned and percent >= threshold:
                warned.add(kind)
                logger.warning(
                    f"Budget usage at {format_pct(percent)} of {kind} limit",
                    extra={"context": {"run_id": run.id, "kind": kind, "percent": str(percent)}},
                )

    def handle_execution_error(self, run: Run, error: BaseException) -> RunState:
        """Classify a failure using this controller's kill switch and clock."""
        return classify_failure(run, error, self.context.kill_switch, self.clock)

    def generate_summary(self, run: Run) -> RunSummary:
        return summarize_run(run, self.clock)

    def get_events(self) -> List[StepEvent]:
        return self.context.get_events()

    def reset_kill_switch(self) -> None:
        self.context.reset_kill_switch()

    def clear_events(self) -> None:
        self.context.clear_events()
