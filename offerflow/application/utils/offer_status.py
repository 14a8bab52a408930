from __future__ import annotations

from datetime import datetime, timezone

from offerflow.domain.entities.offer import OfferRecord

OPEN_STATUSES = frozenset({"draft", "sent", "viewed"})


def is_accepted(offer: OfferRecord) -> bool:
    return offer.status == "accepted" or offer.approved_at is not None


def is_expired(offer: OfferRecord, now: datetime | None = None) -> bool:
    if offer.valid_until is None:
        return False
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    valid_until = offer.valid_until
    if valid_until.tzinfo is None:
        valid_until = valid_until.replace(tzinfo=timezone.utc)
    return valid_until < now


def can_respond(
    offer: OfferRecord,
    now: datetime | None = None,
    open_statuses: frozenset[str] = OPEN_STATUSES,
) -> bool:
    """Whether the customer may still accept the offer for the first time."""
    return offer.status in open_statuses and not is_expired(offer, now) and offer.approved_at is None
