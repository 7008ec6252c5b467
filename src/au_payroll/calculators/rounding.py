"""Money and hours rounding helpers.

Rounding:
- AUD to 2 decimals on every emitted amount
- Internal compute at >=4 decimals (rates, accrued hours)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

PRECISION = Decimal("0.0001")  # 4 decimal places for rates and hours
OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for money

ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a number to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def round_precise(amount: Decimal) -> Decimal:
    """Round to 4 decimal places."""
    return amount.quantize(PRECISION, rounding=ROUND_HALF_UP)


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts and round the total to cents."""
    return round_to_cents(sum(amounts, ZERO))
