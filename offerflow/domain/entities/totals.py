from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class OfferTotals:
    net: Decimal = Decimal("0")
    gross: Decimal = Decimal("0")

    @property
    def vat(self) -> Decimal:
        return self.gross - self.net


@dataclass(frozen=True)
class PricedLine:
    scope_id: str | None
    option_id: str
    item_id: str
    name: str
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal
    line_net: Decimal
    is_optional: bool


@dataclass(frozen=True)
class SelectionBreakdown:
    totals: OfferTotals
    lines: tuple[PricedLine, ...]
    option_subtotals: dict[str, Decimal]  # option_id -> net of included lines
