"""
Unit tests for the budget guard.
"""

import unittest
from decimal import Decimal

from core.constants import BudgetKind, ErrorCode
from core.exceptions import BudgetExceeded
from core.models import Budget, create_run
from execution.budget_guard import (
    add_cost,
    budget_usage_percent,
    check_limits,
    enforce_limits,
)


def make_run(max_tokens: int = 200, max_usd: str = "0.5"):
    return create_run("run_budget", Budget(max_tokens=max_tokens, max_usd=Decimal(max_usd)))


class TestEnforceLimits(unittest.TestCase):

    def test_under_budget_passes(self):
        run = make_run()
        add_cost(run, 150, Decimal("0.3"))
        enforce_limits(run)
        self.assertTrue(check_limits(run).ok)

    def test_exactly_at_limit_passes(self):
        run = make_run()
        add_cost(run, 200, Decimal("0.5"))
        enforce_limits(run)

    def test_tokens_over(self):
        run = make_run()
        add_cost(run, 250, Decimal("0.1"))
        with self.assertRaises(BudgetExceeded) as ctx:
            enforce_limits(run)
        self.assertEqual(ctx.exception.kind, BudgetKind.TOKENS)
        self.assertEqual(ctx.exception.spent, 250)
        self.assertEqual(ctx.exception.limit, 200)

    def test_usd_over(self):
        run = make_run()
        add_cost(run, 10, Decimal("0.6"))
        with self.assertRaises(BudgetExceeded) as ctx:
            enforce_limits(run)
        self.assertEqual(ctx.exception.kind, BudgetKind.USD)
        self.assertEqual(ctx.exception.spent, Decimal("0.6"))
        self.assertEqual(ctx.exception.limit, Decimal("0.5"))

    def test_both_over_reports_tokens(self):
        run = make_run()
        add_cost(run, 500, Decimal("5"))
        result = check_limits(run)
        self.assertFalse(result.ok)
        self.assertEqual(result.code, ErrorCode.BUDGET_EXCEEDED)
        self.assertEqual(result.error.kind, BudgetKind.TOKENS)

    def test_check_does_not_change_spend(self):
        run = make_run()
        add_cost(run, 500, Decimal("5"))
        check_limits(run)
        self.assertEqual(run.spent.tokens, 500)
        self.assertEqual(run.spent.usd, Decimal("5"))


class TestAddCost(unittest.TestCase):

    def test_accumulates(self):
        run = make_run()
        add_cost(run, 50, Decimal("0.1"))
        add_cost(run, 50, "0.1")
        self.assertEqual(run.spent.tokens, 100)
        self.assertEqual(run.spent.usd, Decimal("0.2"))

    def test_negative_rejected(self):
        run = make_run()
        with self.assertRaises(ValueError):
            add_cost(run, -1, Decimal("0"))
        with self.assertRaises(ValueError):
            add_cost(run, 0, Decimal("-0.01"))
        self.assertEqual(run.spent.tokens, 0)
        self.assertEqual(run.spent.usd, Decimal("0"))


class TestBudgetUsagePercent(unittest.TestCase):

    def test_percentages(self):
        run = make_run(max_tokens=400, max_usd="0.5")
        add_cost(run, 100, Decimal("0.4"))
        usage = budget_usage_percent(run)
        self.assertEqual(usage["tokens"], Decimal("25"))
        self.assertEqual(usage["usd"], Decimal("80"))

    def test_zero_limit(self):
        run = make_run(max_tokens=0, max_usd="0")
        self.assertEqual(budget_usage_percent(run)["tokens"], Decimal("0"))
        add_cost(run, 1, Decimal("0.01"))
        usage = budget_usage_percent(run)
        self.assertEqual(usage["tokens"], Decimal("100"))
        self.assertEqual(usage["usd"], Decimal("100"))


if __name__ == "__main__":
    unittest.main()
