from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from offerflow.application.exceptions import SelectionValidationError
from offerflow.application.ports.notifier import NotifierPort
from offerflow.application.ports.offer_store import OfferStorePort
from offerflow.application.use_cases.pricing import compute_totals
from offerflow.application.utils.offer_status import OPEN_STATUSES, can_respond, is_accepted
from offerflow.application.utils.snapshot_codec import snapshot_to_dict
from offerflow.domain.entities.catalog import OfferCatalog
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.selection_state import SelectionState
from offerflow.domain.entities.totals import OfferTotals


@dataclass(frozen=True)
class ConfirmationPayload:
    snapshot: dict[str, Any]
    totals: OfferTotals


@dataclass(frozen=True)
class ConfirmResult:
    offer_id: str
    snapshot: dict[str, Any]
    totals: OfferTotals
    approved_at: datetime


def prepare_confirmation(catalog: OfferCatalog, state: SelectionState) -> ConfirmationPayload:
    """Snapshot and totals to persist. Requires a non-extras scope with one of its variants chosen."""
    scope = catalog.find_scope(state.active_scope_id)
    if scope is None or scope.is_extras:
        raise SelectionValidationError("Choose one of the offered services before confirming.")
    variant_ids = {option.id for option in catalog.variants(scope.id)}
    if state.chosen_option_id(scope.id) not in variant_ids:
        raise SelectionValidationError(f"Choose a variant of {scope.name} before confirming.")
    return ConfirmationPayload(snapshot=snapshot_to_dict(state), totals=compute_totals(catalog, state))


class ConfirmOfferUseCase:
    def __init__(
        self,
        store: OfferStorePort,
        notifier: NotifierPort | None = None,
        open_statuses: frozenset[str] = OPEN_STATUSES,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._open_statuses = open_statuses
        self._logger = logging.getLogger(__name__)

    def execute(self, offer: OfferRecord, state: SelectionState, editing: bool = False) -> ConfirmResult:
        """
        Accept the offer with the given selection, or overwrite an accepted one in edit mode.
        Nothing is written when validation fails; store errors propagate unchanged.
        """
        if not (can_respond(offer, open_statuses=self._open_statuses) or (editing and is_accepted(offer))):
            self._logger.warning("Offer not open for confirmation", extra={"offer_id": offer.id, "status": offer.status})
            raise SelectionValidationError("This offer can no longer be accepted.")

        try:
            payload = prepare_confirmation(offer.catalog, state)
        except SelectionValidationError:
            self._logger.warning("Selection not ready for confirmation", extra={"offer_id": offer.id})
            raise

        approved_at = datetime.now(timezone.utc)
        self._store.save_confirmation(
            offer_id=offer.id,
            snapshot=payload.snapshot,
            totals=payload.totals,
            approved_at=approved_at,
        )
        self._logger.info(
            "Offer confirmed",
            extra={
                "offer_id": offer.id,
                "scope_id": state.active_scope_id,
                "total_net": str(payload.totals.net),
                "total_gross": str(payload.totals.gross),
            },
        )

        if self._notifier is not None:
            try:
                self._notifier.offer_accepted(offer, payload.totals)
            except Exception as e:
                self._logger.exception("Acceptance notification failed", extra={"offer_id": offer.id, "error": str(e)})

        return ConfirmResult(
            offer_id=offer.id,
            snapshot=payload.snapshot,
            totals=payload.totals,
            approved_at=approved_at,
        )
