from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from offerflow.domain.entities.catalog import OfferCatalog
from offerflow.domain.entities.totals import OfferTotals


@dataclass(frozen=True)
class OfferRecord:
    id: str
    offer_number: str
    status: str  # "draft", "sent", "viewed", "accepted", "rejected"
    catalog: OfferCatalog
    selected_state: dict[str, Any] | None = None  # raw persisted snapshot
    totals: OfferTotals = OfferTotals()
    valid_until: datetime | None = None
    approved_at: datetime | None = None
    customer_name: str | None = None
    instance_id: str | None = None
