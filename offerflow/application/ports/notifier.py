from __future__ import annotations

from abc import ABC, abstractmethod

from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class NotifierPort(ABC):
    @abstractmethod
    def offer_accepted(self, offer: OfferRecord, totals: OfferTotals) -> None:
        raise NotImplementedError
