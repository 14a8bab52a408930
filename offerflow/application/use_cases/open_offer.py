from __future__ import annotations

import logging

from offerflow.application.exceptions import OfferNotFoundError
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.application.use_cases.confirm_offer import ConfirmOfferUseCase
from offerflow.application.use_cases.offer_session import OfferSession


class OpenOfferUseCase:
    def __init__(self, store: OfferStorePort, confirm_use_case: ConfirmOfferUseCase) -> None:
        self._store = store
        self._confirm = confirm_use_case
        self._logger = logging.getLogger(__name__)

    def execute(self, offer_id: str) -> OfferSession:
        offer = self._store.get_offer(offer_id)
        if offer is None:
            raise OfferNotFoundError(f"Offer {offer_id} not found")

        session = OfferSession(offer, self._confirm)
        self._logger.info(
            "Offer opened",
            extra={"offer_id": offer_id, "status": offer.status, "scope_id": session.state.active_scope_id},
        )
        return session
