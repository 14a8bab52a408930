from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from offerflow.application.dto.offer_payload import OfferPayloadDTO
from offerflow.application.exceptions import OfferPersistenceError
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals
from offerflow.infrastructure.backend.backend_client import BackendClient


class BackendOfferStore(OfferStorePort):
    def __init__(self, client: BackendClient, default_vat_rate: Decimal = Decimal("23")) -> None:
        self._client = client
        self._default_vat_rate = default_vat_rate
        self._logger = logging.getLogger(__name__)

    def get_offer(self, offer_id: str) -> OfferRecord | None:
        try:
            row = self._client.fetch_offer(offer_id)
        except httpx.HTTPError as e:
            self._logger.error("Error fetching offer", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} could not be loaded") from e

        if row is None:
            return None
        try:
            return OfferPayloadDTO.model_validate(row).to_record(self._default_vat_rate)
        except ValidationError as e:
            self._logger.error("Backend returned malformed offer", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} has an invalid format") from e

    def save_confirmation(
        self,
        offer_id: str,
        snapshot: dict[str, Any],
        totals: OfferTotals,
        approved_at: datetime,
    ) -> None:
        fields = {
            "status": "accepted",
            "responded_at": approved_at.isoformat(),
            "approved_at": approved_at.isoformat(),
            "selected_state": snapshot,
            "total_net": float(totals.net),
            "total_gross": float(totals.gross),
        }
        try:
            self._client.update_offer(offer_id, fields)
        except httpx.HTTPError as e:
            self._logger.error("Error saving offer confirmation", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} could not be saved") from e
