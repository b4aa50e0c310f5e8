# PATH: execution/steps.py
"""
Step executor interface.

The real unit of work lives outside the controller. An executor is called
with the 1-based step number and reports what the step consumed. It may
raise; the controller treats that as a step failure.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from core.constants import DEFAULT_STEP_COST_USD, DEFAULT_STEP_TOKENS, StepEventType
from core.models import MoneyLike, to_decimal


def to_token_count(value) -> int:
    """Coerce a token count to int; fractional counts are rejected."""
    if isinstance(value, bool):
        raise TypeError("bool is not a token count")
    if isinstance(value, int):
        return value
    number = Decimal(str(value))
    if number != number.to_integral_value():
        raise ValueError(f"Token count must be a whole number, got {value}")
    return int(number)


@dataclass(frozen=True)
class StepResult:
    """Resources used by one step."""
    tokens: int
    cost: Decimal
    description: str
    type: StepEventType = StepEventType.LLM_CALL

    def __post_init__(self):
        object.__setattr__(self, "tokens", to_token_count(self.tokens))
        object.__setattr__(self, "cost", to_decimal(self.cost))
        object.__setattr__(self, "type", StepEventType(self.type))


class StepExecutor(Protocol):
    def __call__(self, step_number: int) -> StepResult:
        ...


class FixedCostStepExecutor:
    """Stand-in executor charging the same cost for every step."""

    def __init__(
        self,
        tokens: int = DEFAULT_STEP_TOKENS,
        cost: MoneyLike = DEFAULT_STEP_COST_USD,
        event_type: StepEventType = StepEventType.LLM_CALL,
    ):
        self.tokens = to_token_count(tokens)
        self.cost = to_decimal(cost)
        self.event_type = StepEventType(event_type)
        self.calls = 0

    def __call__(self, step_number: int) -> StepResult:
        self.calls += 1
        return StepResult(
            tokens=self.tokens,
            cost=self.cost,
            description=f"Executing agent step {step_number}",
            type=self.event_type,
        )


def as_step_result(value) -> StepResult:
    """Accept a StepResult or a (tokens, cost, description[, type]) tuple."""
    if isinstance(value, StepResult):
        return value
    if isinstance(value, tuple) and len(value) in (3, 4):
        return StepResult(*value)
    raise TypeError(f"Step executor returned {type(value).__name__}, expected StepResult")
