"""Decimal helpers for debt amounts.

Amounts are Decimal with exactly 2 decimal places (NUMERIC(10, 2) in the DB).
Never float.
"""

from decimal import ROUND_HALF_UP, Decimal

_TWO_PLACES = Decimal("0.01")

ZERO = Decimal("0.00")


def to_money(value: Decimal | int | str | None) -> Decimal:
    """Normalize to a 2-place Decimal. None (SQL SUM over no rows) -> 0.00."""
    if value is None:
        return ZERO
    return Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def is_positive(amount: Decimal) -> bool:
    return amount > 0


def money_to_str(amount: Decimal) -> str:
    """Plain 2-place string: Decimal('100') -> '100.00', no grouping, no symbol."""
    return f"{to_money(amount):.2f}"
