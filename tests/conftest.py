from __future__ import annotations

from decimal import Decimal

import pytest

from offerflow.domain.entities.catalog import OfferCatalog, OfferItem, OfferOption, OfferScope
from offerflow.domain.entities.offer import OfferRecord


def build_catalog() -> OfferCatalog:
    """
    Paint Protection: Standard (1000) / Premium (1800, -10%) plus an upsell line (200).
    Wrap: one variant whose mandatory lines are a single-select group (500 / 700), an
    optional line (100) and an upsell (80). Add-ons: extras scope with 50 and 75.
    """
    return OfferCatalog(
        scopes=(
            OfferScope(id="paint", name="Paint Protection"),
            OfferScope(id="wrap", name="Wrap"),
            OfferScope(id="addons", name="Add-ons", is_extras=True),
        ),
        options=(
            OfferOption(
                id="premium",
                name="Premium",
                scope_id="paint",
                sort_order=2,
                items=(OfferItem(id="premium-1", name="Premium film", unit_price=Decimal("1800"), discount_percent=Decimal("10")),),
            ),
            OfferOption(
                id="standard",
                name="Standard",
                scope_id="paint",
                sort_order=1,
                items=(OfferItem(id="standard-1", name="Standard film", unit_price=Decimal("1000")),),
            ),
            OfferOption(
                id="paint-upsell",
                name="Paint extras",
                scope_id="paint",
                is_upsell=True,
                sort_order=3,
                items=(OfferItem(id="upsell-1", name="Headlight film", unit_price=Decimal("200"), is_optional=True),),
            ),
            OfferOption(
                id="wrap-basic",
                name="Wrap basic",
                scope_id="wrap",
                sort_order=4,
                items=(
                    OfferItem(id="wrap-a", name="Matte", unit_price=Decimal("500")),
                    OfferItem(id="wrap-b", name="Gloss", unit_price=Decimal("700")),
                    OfferItem(id="wrap-opt", name="Door jambs", unit_price=Decimal("100"), is_optional=True),
                ),
            ),
            OfferOption(
                id="wrap-upsell",
                name="Wrap extras",
                scope_id="wrap",
                is_upsell=True,
                sort_order=5,
                items=(OfferItem(id="wrap-upsell-1", name="Logo removal", unit_price=Decimal("80"), is_optional=True),),
            ),
            OfferOption(
                id="addons-opt",
                name="Add-ons",
                scope_id="addons",
                sort_order=6,
                items=(
                    OfferItem(id="addon-50", name="Interior cleaning", unit_price=Decimal("50"), is_optional=True),
                    OfferItem(id="addon-75", name="Rim coating", unit_price=Decimal("75"), is_optional=True),
                ),
            ),
        ),
        vat_rate=Decimal("23"),
    )


def build_offer(status: str = "sent", selected_state: dict | None = None, **kwargs) -> OfferRecord:
    return OfferRecord(
        id=kwargs.pop("id", "offer-1"),
        offer_number=kwargs.pop("offer_number", "2024/001"),
        status=status,
        catalog=kwargs.pop("catalog", build_catalog()),
        selected_state=selected_state,
        **kwargs,
    )


@pytest.fixture
def catalog() -> OfferCatalog:
    return build_catalog()


@pytest.fixture
def offer() -> OfferRecord:
    return build_offer()
