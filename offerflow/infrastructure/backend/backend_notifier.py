from __future__ import annotations

from offerflow.application.ports.notifier import NotifierPort
from offerflow.application.utils.money import format_money
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals
from offerflow.infrastructure.backend.backend_client import BackendClient


class BackendNotifier(NotifierPort):
    def __init__(self, client: BackendClient, currency: str = "PLN") -> None:
        self._client = client
        self._currency = currency

    def offer_accepted(self, offer: OfferRecord, totals: OfferTotals) -> None:
        customer = offer.customer_name or "Customer"
        self._client.insert_notification(
            {
                "instance_id": offer.instance_id,
                "type": "offer_approved",
                "title": f"Offer {offer.offer_number} accepted",
                "description": f"{customer} accepted the offer for {format_money(totals.gross, self._currency)}",
                "entity_type": "offer",
                "entity_id": offer.id,
            }
        )
