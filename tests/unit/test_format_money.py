"""
Unit tests for format_money module.

No float money: formatting accepts str/Decimal/int/float/None and never crashes.
"""

import unittest
from decimal import Decimal

from core.format_money import format_money, format_pct, format_usd


class TestFormatMoney(unittest.TestCase):

    def test_decimal(self):
        self.assertEqual(format_money(Decimal("0.1")), "0.1000")

    def test_str(self):
        self.assertEqual(format_money("123.45", 2), "123.45")

    def test_int(self):
        self.assertEqual(format_money(5), "5.0000")

    def test_float(self):
        self.assertEqual(format_money(0.3), "0.3000")

    def test_none_and_empty(self):
        self.assertEqual(format_money(None), "0.0000")
        self.assertEqual(format_money("   "), "0.0000")

    def test_bool(self):
        self.assertEqual(format_money(True, 2), "1.00")

    def test_half_up(self):
        self.assertEqual(format_money(Decimal("0.005"), 2), "0.01")
        self.assertEqual(format_money(Decimal("0.00005")), "0.0001")

    def test_zero_decimals(self):
        self.assertEqual(format_money(Decimal("2.5"), 0), "3")

    def test_unparseable(self):
        self.assertEqual(format_money("not money"), "0.0000")


class TestFormatUsdAndPct(unittest.TestCase):

    def test_usd(self):
        self.assertEqual(format_usd(Decimal("0.5")), "$0.5000")

    def test_pct(self):
        self.assertEqual(format_pct(Decimal("87.5")), "87.5%")
        self.assertEqual(format_pct(Decimal("80")), "80.0%")


if __name__ == "__main__":
    unittest.main()
