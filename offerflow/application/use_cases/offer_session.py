from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import replace

from offerflow.application.exceptions import ConfirmationInProgressError, SelectionValidationError
from offerflow.application.use_cases import selection_rules
from offerflow.application.use_cases.confirm_offer import ConfirmOfferUseCase, ConfirmResult
from offerflow.application.use_cases.initialize_selection import initialize_selection
from offerflow.application.use_cases.pricing import compute_totals, selection_breakdown
from offerflow.application.utils.offer_status import is_accepted
from offerflow.application.utils.snapshot_codec import parse_snapshot
from offerflow.domain.entities.catalog import OfferCatalog
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.selection_state import SelectionState
from offerflow.domain.entities.totals import OfferTotals, SelectionBreakdown


class OfferSession:
    """
    One open view of one offer: the current selection plus the confirmation guard.

    Selection changes apply synchronously and one at a time, even when requests for the same
    offer arrive on several threads. `confirm` is the only awaitable step; while it is in
    flight a second confirm is refused but the selection can still change.
    """

    def __init__(self, offer: OfferRecord, confirm_use_case: ConfirmOfferUseCase) -> None:
        self._offer = offer
        self._confirm = confirm_use_case
        self._state = _restore(offer)
        self._responding = False
        self._editing = False
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def offer(self) -> OfferRecord:
        return self._offer

    @property
    def catalog(self) -> OfferCatalog:
        return self._offer.catalog

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def responding(self) -> bool:
        return self._responding

    @property
    def editing(self) -> bool:
        return self._editing

    @property
    def interactions_disabled(self) -> bool:
        return is_accepted(self._offer) and not self._editing

    def totals(self) -> OfferTotals:
        return compute_totals(self.catalog, self._state)

    def breakdown(self) -> SelectionBreakdown:
        return selection_breakdown(self.catalog, self._state)

    def choose_option(self, scope_id: str, option_id: str) -> SelectionState:
        with self._lock:
            self._ensure_editable()
            self._state = selection_rules.choose_option(self.catalog, self._state, scope_id, option_id)
            return self._state

    def toggle_optional_item(self, item_id: str) -> SelectionState:
        with self._lock:
            self._ensure_editable()
            self._state = selection_rules.toggle_optional_item(self.catalog, self._state, item_id)
            return self._state

    def choose_mandatory_item(self, option_id: str, item_id: str) -> SelectionState:
        with self._lock:
            self._ensure_editable()
            self._state = selection_rules.choose_mandatory_item(self.catalog, self._state, option_id, item_id)
            return self._state

    def begin_edit(self) -> None:
        with self._lock:
            if not is_accepted(self._offer):
                raise SelectionValidationError("Only accepted offers can be edited.")
            self._editing = True
        self._logger.info("Edit mode started", extra={"offer_id": self._offer.id})

    def cancel_edit(self) -> None:
        """Leave edit mode and drop unsaved changes. Outside edit mode nothing changes."""
        with self._lock:
            if not self._editing:
                return
            self._editing = False
            self._state = _restore(self._offer)

    async def confirm(self) -> ConfirmResult:
        if self._responding:
            raise ConfirmationInProgressError("A confirmation for this offer is already being saved.")

        self._responding = True
        with self._lock:
            offer, submitted, editing = self._offer, self._state, self._editing
        try:
            result = await asyncio.to_thread(self._confirm.execute, offer, submitted, editing)
        except Exception as e:
            self._logger.warning("Confirmation failed", extra={"offer_id": self._offer.id, "error": str(e)})
            raise
        finally:
            self._responding = False

        with self._lock:
            self._offer = replace(
                self._offer,
                status="accepted",
                approved_at=result.approved_at,
                selected_state=result.snapshot,
                totals=result.totals,
            )
            self._editing = False
        return result

    def _ensure_editable(self) -> None:
        if self.interactions_disabled:
            raise SelectionValidationError("This offer is already accepted. Start editing to change it.")


def _restore(offer: OfferRecord) -> SelectionState:
    return initialize_selection(offer.catalog, parse_snapshot(offer.selected_state))
