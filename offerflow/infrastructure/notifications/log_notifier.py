from __future__ import annotations

import logging

from offerflow.application.ports.notifier import NotifierPort
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class LogNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def offer_accepted(self, offer: OfferRecord, totals: OfferTotals) -> None:
        self._logger.info(
            "Mock offer accepted notification",
            extra={"offer_id": offer.id, "total_net": str(totals.net), "total_gross": str(totals.gross)},
        )
