#!/usr/bin/env python3
"""
run_controller.py - CLI entrypoint for a single guarded run.

Usage:
    python run_controller.py
    python run_controller.py --max-steps 10 --max-tokens 200 --max-usd 0.5
    python run_controller.py --kill-after 3 --no-json-logs
"""

import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from core.constants import RunState
from core.logging import get_logger, set_global_context, setup_logging
from core.models import create_run, to_decimal
from core.time import now_ms
from execution.config import load_controller_config
from execution.context import ExecutionContext
from execution.controller import ExecutionController
from execution.steps import FixedCostStepExecutor, StepExecutor, StepResult
from replay.formatter import TextFormatter
from replay.history import replay_to

__version__ = "0.1.0"

logger = get_logger("runguard.cli", component="cli")


class OperatorKill:
    """Wraps an executor and trips the kill switch once `after` steps have run."""

    def __init__(self, inner: StepExecutor, context: ExecutionContext, after: int):
        self.inner = inner
        self.context = context
        self.after = after

    def __call__(self, step_number: int) -> StepResult:
        result = self.inner(step_number)
        if step_number >= self.after:
            self.context.kill(f"Operator kill after step {step_number}")
        return result


def _parse_usd(ctx, param, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        amount = to_decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"{value!r} is not a decimal amount")
    if not amount.is_finite() or amount < 0:
        raise click.BadParameter(f"{value!r} must be a non-negative amount")
    return amount


@click.command()
@click.option("--run-id", default=None, help="Run identifier (default: run_<epoch ms>)")
@click.option("--max-steps", "-n", default=None, type=click.IntRange(min=0), help="Maximum steps to execute")
@click.option("--max-tokens", default=None, type=click.IntRange(min=0), help="Token budget")
@click.option("--max-usd", default=None, callback=_parse_usd, help="USD budget, e.g. 0.5")
@click.option(
    "--kill-after",
    default=None,
    type=click.IntRange(min=1),
    help="Trigger the kill switch after this many steps (simulated operator)",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to controller YAML (default: config/controller.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option("--json-logs/--no-json-logs", default=None, help="Use JSON log format")
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write JSON logs to this file",
)
def main(
    run_id: Optional[str],
    max_steps: Optional[int],
    max_tokens: Optional[int],
    max_usd: Optional[Decimal],
    kill_after: Optional[int],
    config_path: Optional[Path],
    log_level: Optional[str],
    json_logs: Optional[bool],
    log_file: Optional[Path],
) -> None:
    """
    RUNGUARD guarded run.

    Executes one budgeted run with the stand-in step executor, then prints
    the run summary and replays the event log.
    """
    load_dotenv()
    config = load_controller_config(config_path)

    # Command-line options win over file and environment
    if max_steps is not None:
        config.max_steps = max_steps
    if max_tokens is not None:
        config.max_tokens = max_tokens
    if max_usd is not None:
        config.max_usd = max_usd

    setup_logging(
        level=log_level or config.log_level,
        json_output=config.json_logs if json_logs is None else json_logs,
        log_file=str(log_file) if log_file else None,
    )
    set_global_context(service="runguard", version=__version__)

    context = ExecutionContext()
    executor: StepExecutor = FixedCostStepExecutor(
        tokens=config.step.tokens,
        cost=config.step.cost,
        event_type=config.step.type,
    )
    if kill_after is not None:
        executor = OperatorKill(executor, context, kill_after)

    controller = ExecutionController(context=context, executor=executor, config=config)
    run = create_run(run_id or f"run_{now_ms()}", config.budget())

    click.echo(f"Run ID: {run.id}")
    click.echo(f"Budget: {run.budget.max_tokens} tokens, ${run.budget.max_usd}")

    outcome = controller.execute(run, config.max_steps)

    formatter = TextFormatter()
    click.echo("")
    for line in formatter.format_summary(controller.generate_summary(run)):
        click.echo(line)

    click.echo("")
    replay_to(controller.get_events(), click.echo, formatter)

    if not outcome.ok:
        logger.info("Run did not complete", extra={"context": outcome.to_dict()})
    sys.exit(0 if run.state == RunState.COMPLETED else 1)


if __name__ == "__main__":
    main()
