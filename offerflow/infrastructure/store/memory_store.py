from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any

from offerflow.application.exceptions import OfferNotFoundError
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class MemoryOfferStore(OfferStorePort):
    def __init__(self, offers: list[OfferRecord] | None = None) -> None:
        self._offers: dict[str, OfferRecord] = {offer.id: offer for offer in offers or []}
        self.writes: list[tuple[str, dict[str, Any], OfferTotals]] = []

    def add_offer(self, offer: OfferRecord) -> None:
        self._offers[offer.id] = offer

    def get_offer(self, offer_id: str) -> OfferRecord | None:
        return self._offers.get(offer_id)

    def save_confirmation(
        self,
        offer_id: str,
        snapshot: dict[str, Any],
        totals: OfferTotals,
        approved_at: datetime,
    ) -> None:
        offer = self._offers.get(offer_id)
        if offer is None:
            raise OfferNotFoundError(f"Offer {offer_id} not found")
        self._offers[offer_id] = replace(
            offer,
            status="accepted",
            selected_state=dict(snapshot),
            totals=totals,
            approved_at=approved_at,
        )
        self.writes.append((offer_id, dict(snapshot), totals))
