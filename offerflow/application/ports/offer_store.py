from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class OfferStorePort(ABC):
    @abstractmethod
    def get_offer(self, offer_id: str) -> OfferRecord | None:
        """Fetch an offer with its catalog, last snapshot and totals. None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def save_confirmation(
        self,
        offer_id: str,
        snapshot: dict[str, Any],
        totals: OfferTotals,
        approved_at: datetime,
    ) -> None:
        """
        Persist snapshot, totals and the accepted status in a single write.
        Must raise OfferPersistenceError on failure and leave the stored offer unchanged.
        """
        raise NotImplementedError
