from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from offerflow.application.dto.offer_payload import OfferPayloadDTO
from offerflow.application.exceptions import OfferNotFoundError, OfferPersistenceError
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class JsonOfferStore(OfferStorePort):
    """One JSON file per offer, holding the offer row in the backend's shape."""

    def __init__(self, data_dir: str = "./data/offers", default_vat_rate: Decimal = Decimal("23")) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._default_vat_rate = default_vat_rate
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, offer_id: str) -> threading.Lock:
        """Get or create a lock for an offer_id."""
        with self._lock_lock:
            if offer_id not in self._locks:
                self._locks[offer_id] = threading.Lock()
            return self._locks[offer_id]

    def _get_file_path(self, offer_id: str) -> Path:
        return self._data_dir / f"{offer_id}.json"

    def _load_offer_data(self, offer_id: str) -> dict[str, Any] | None:
        """Load the raw offer row, None if the file does not exist."""
        file_path = self._get_file_path(offer_id)
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.error("Offer file unreadable", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} could not be read") from e
        if not isinstance(data, dict):
            raise OfferPersistenceError(f"Offer {offer_id} is not a JSON object")
        return data

    def _save_offer_data(self, offer_id: str, data: dict[str, Any]) -> None:
        """Save offer row atomically."""
        file_path = self._get_file_path(offer_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            self._logger.error("Offer file write failed", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} could not be saved") from e

    def put_offer(self, payload: dict[str, Any]) -> None:
        """Store an offer row as received from the backend (seeding, local runs)."""
        offer_id = str(payload["id"])
        with self._get_lock(offer_id):
            self._save_offer_data(offer_id, payload)

    def get_offer(self, offer_id: str) -> OfferRecord | None:
        with self._get_lock(offer_id):
            data = self._load_offer_data(offer_id)
        if data is None:
            return None
        try:
            return OfferPayloadDTO.model_validate(data).to_record(self._default_vat_rate)
        except ValidationError as e:
            self._logger.error("Offer file has invalid shape", extra={"offer_id": offer_id, "error": str(e)})
            raise OfferPersistenceError(f"Offer {offer_id} has an invalid format") from e

    def save_confirmation(
        self,
        offer_id: str,
        snapshot: dict[str, Any],
        totals: OfferTotals,
        approved_at: datetime,
    ) -> None:
        with self._get_lock(offer_id):
            data = self._load_offer_data(offer_id)
            if data is None:
                raise OfferNotFoundError(f"Offer {offer_id} not found")
            data.update(
                {
                    "status": "accepted",
                    "approved_at": approved_at.isoformat(),
                    "responded_at": approved_at.isoformat(),
                    "selected_state": snapshot,
                    "total_net": float(totals.net),
                    "total_gross": float(totals.gross),
                }
            )
            self._save_offer_data(offer_id, data)
