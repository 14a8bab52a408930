from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Coerce a backend number (int, float, str) to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal, currency: str) -> str:
    # Display only; totals stay unrounded until this point.
    return f"{round_money(value):,.2f} {currency}"
