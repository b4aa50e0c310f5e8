# PATH: core/models.py
"""
Core data models for RUNGUARD.

RUN CONTRACT
============
- id: assigned at creation, never changes
- state: mutated only by execution.state_machine
- budget: frozen at creation
- spent: tokens and usd never decrease
- steps: append-only cache of this run's events (event log is authoritative)
- started_at / ended_at: epoch ms, each set exactly once

MONEY CONTRACT
==============
USD amounts are Decimal, never float. to_dict() renders them as str.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from core.constants import RunState, StepEventType


MoneyLike = Union[Decimal, str, int, float]


def to_decimal(value: MoneyLike) -> Decimal:
    """Coerce a money value to Decimal via its string form."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a money value")
    return Decimal(str(value))


def new_event_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Budget:
    """Hard limits for a run."""
    max_tokens: int
    max_usd: Decimal

    def __post_init__(self):
        object.__setattr__(self, "max_usd", to_decimal(self.max_usd))
        if self.max_tokens < 0:
            raise ValueError(f"max_tokens must be >= 0, got {self.max_tokens}")
        if self.max_usd < 0:
            raise ValueError(f"max_usd must be >= 0, got {self.max_usd}")

    def to_dict(self) -> Dict[str, Any]:
        return {"max_tokens": self.max_tokens, "max_usd": str(self.max_usd)}


@dataclass
class Spend:
    """Running totals. Only execution.budget_guard.add_cost increases them."""
    tokens: int = 0
    usd: Decimal = field(default_factory=lambda: Decimal("0"))

    def to_dict(self) -> Dict[str, Any]:
        return {"tokens": self.tokens, "usd": str(self.usd)}


@dataclass(frozen=True)
class StepEvent:
    """One immutable fact about a successful step."""
    id: str
    run_id: str
    step_number: int
    type: StepEventType
    description: str
    cost: Decimal
    tokens: int
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "run_id": self.run_id,
            "step_number": self.step_number,
            "type": self.type.value,
            "description": self.description,
            "cost": str(self.cost),
            "tokens": self.tokens,
            "timestamp": self.timestamp,
        }


@dataclass
class Run:
    """The unit of execution."""
    id: str
    budget: Budget
    state: RunState = RunState.CREATED
    spent: Spend = field(default_factory=Spend)
    steps: List[StepEvent] = field(default_factory=list)
    started_at: Optional[int] = None
    ended_at: Optional[int] = None
    termination_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state.value,
            "budget": self.budget.to_dict(),
            "spent": self.spent.to_dict(),
            "steps": [e.to_dict() for e in self.steps],
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "termination_reason": self.termination_reason,
        }


def create_run(run_id: str, budget: Union[Budget, Dict[str, Any]]) -> Run:
    """
    Create a new run in the CREATED state.

    Args:
        run_id: Opaque unique identifier
        budget: Budget instance or a dict with max_tokens / max_usd

    Returns:
        Run with zero spend and no steps
    """
    if not run_id:
        raise ValueError("run_id must be a non-empty string")
    if isinstance(budget, dict):
        budget = Budget(max_tokens=int(budget["max_tokens"]), max_usd=to_decimal(budget["max_usd"]))
    return Run(id=run_id, budget=budget)
