# PATH: execution/budget_guard.py
"""
Budget guard.

Charge-then-check: a step's cost is added to run.spent first, then the
limits are evaluated. The step that causes the overage stays charged.

Check order is tokens, then usd. Spend equal to a limit is accepted;
only strictly greater fails.
"""

from decimal import Decimal
from typing import Dict

from core.constants import BudgetKind
from core.exceptions import BudgetExceeded
from core.models import MoneyLike, Run, to_decimal
from execution.results import CheckResult


_HUNDRED = Decimal("100")


def add_cost(run: Run, tokens: int, usd: MoneyLike) -> None:
    """Accumulate spend. Totals never decrease."""
    usd = to_decimal(usd)
    if tokens < 0 or usd < 0:
        raise ValueError(f"Step cost must be non-negative, got tokens={tokens} usd={usd}")
    run.spent.tokens += tokens
    run.spent.usd += usd


def check_limits(run: Run) -> CheckResult:
    """Tagged form of enforce_limits()."""
    if run.spent.tokens > run.budget.max_tokens:
        return CheckResult.failed(
            BudgetExceeded(BudgetKind.TOKENS, run.spent.tokens, run.budget.max_tokens)
        )
    if run.spent.usd > run.budget.max_usd:
        return CheckResult.failed(
            BudgetExceeded(BudgetKind.USD, run.spent.usd, run.budget.max_usd)
        )
    return CheckResult.passed()


def enforce_limits(run: Run) -> None:
    """Raise BudgetExceeded if spend is over either limit."""
    check_limits(run).raise_for_error()


def _percent(spent: Decimal, limit: Decimal) -> Decimal:
    if limit == 0:
        return _HUNDRED if spent > 0 else Decimal("0")
    return spent / limit * _HUNDRED


def budget_usage_percent(run: Run) -> Dict[str, Decimal]:
    """
    Percentage of each budget dimension used so far.

    Returns:
        {"tokens": Decimal, "usd": Decimal}; may exceed 100 after an overage
    """
    return {
        BudgetKind.TOKENS.value: _percent(Decimal(run.spent.tokens), Decimal(run.budget.max_tokens)),
        BudgetKind.USD.value: _percent(run.spent.usd, run.budget.max_usd),
    }
