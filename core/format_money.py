# PATH: core/format_money.py
"""
Safe money formatting utilities for RUNGUARD.

No float money: all USD values are Decimal. This module renders them
for logs, replay lines and summaries.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union


def format_money(value: Union[str, Decimal, int, float, None], decimals: int = 4) -> str:
    """
    Safely format a money value to string with specified decimal places.

    Uses ROUND_HALF_UP. Never raises on numeric input; None and
    unparseable values render as zero.

    Example:
        >>> format_money(Decimal("0.1"))
        '0.1000'
        >>> format_money(None, 2)
        '0.00'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero

    try:
        if isinstance(value, Decimal):
            dec_value = value
        elif isinstance(value, bool):
            # bool is a subclass of int
            dec_value = Decimal(1 if value else 0)
        elif isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value)
        else:
            dec_value = Decimal(str(value))

        with localcontext() as ctx:
            ctx.prec = 50
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

        return f"{rounded:.{decimals}f}"

    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_usd(value: Union[str, Decimal, int, float, None], decimals: int = 4) -> str:
    """Format with a leading dollar sign, e.g. "$0.1000"."""
    return f"${format_money(value, decimals)}"


def format_pct(value: Union[str, Decimal, int, float, None]) -> str:
    """Format a percentage value with one decimal, e.g. "80.0%"."""
    return f"{format_money(value, decimals=1)}%"
