from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from offerflow.application.utils.money import to_decimal
from offerflow.domain.entities.catalog import OfferCatalog, OfferItem, OfferOption, OfferScope
from offerflow.domain.entities.offer import OfferRecord
from offerflow.domain.entities.totals import OfferTotals


class ScopeRefDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    description: str | None = None
    is_extras_scope: bool | None = False


class OptionItemDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    custom_name: str | None = None
    custom_description: str | None = None
    quantity: Any = 1
    unit_price: Any = 0
    unit: str | None = None
    discount_percent: Any = 0
    is_optional: bool | None = False

    def to_item(self) -> OfferItem:
        return OfferItem(
            id=self.id,
            name=self.custom_name or "",
            quantity=to_decimal(self.quantity, Decimal("1")),
            unit_price=to_decimal(self.unit_price),
            discount_percent=min(max(to_decimal(self.discount_percent), Decimal("0")), Decimal("100")),
            is_optional=bool(self.is_optional),
            unit=self.unit or "szt.",
            description=self.custom_description,
        )


class OptionDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    description: str | None = None
    is_selected: bool | None = True
    sort_order: int | None = 0
    scope_id: str | None = None
    is_upsell: bool | None = False
    scope: ScopeRefDTO | None = None
    offer_option_items: list[OptionItemDTO] = Field(default_factory=list)


class CustomerDataDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    phone: str | None = None


class OfferPayloadDTO(BaseModel):
    """Offer row as returned by the backend, with nested options, scopes and items."""

    model_config = ConfigDict(extra="ignore")

    id: str
    offer_number: str = ""
    instance_id: str | None = None
    customer_data: CustomerDataDTO | None = None
    status: str = "draft"
    total_net: Any = 0
    total_gross: Any = 0
    vat_rate: Any = None
    hide_unit_prices: bool | None = False
    valid_until: datetime | date | None = None
    approved_at: datetime | None = None
    selected_state: Any = None
    offer_options: list[OptionDTO] = Field(default_factory=list)

    def to_catalog(self, default_vat_rate: Decimal) -> OfferCatalog:
        # Options the admin left out of the offer are not part of what the customer sees.
        options = sorted(
            (opt for opt in self.offer_options if opt.is_selected is not False),
            key=lambda opt: opt.sort_order or 0,
        )

        scopes: dict[str, OfferScope] = {}
        for opt in options:
            scope_id = opt.scope_id or (opt.scope.id if opt.scope else None)
            if scope_id is None or scope_id in scopes:
                continue
            ref = opt.scope if opt.scope and opt.scope.id == scope_id else None
            scopes[scope_id] = OfferScope(
                id=scope_id,
                name=(ref.name if ref else "") or opt.name,
                is_extras=bool(ref.is_extras_scope) if ref else False,
                description=ref.description if ref else None,
            )

        return OfferCatalog(
            scopes=tuple(scopes.values()),
            options=tuple(
                OfferOption(
                    id=opt.id,
                    name=opt.name,
                    scope_id=opt.scope_id or (opt.scope.id if opt.scope else None),
                    is_upsell=bool(opt.is_upsell),
                    sort_order=opt.sort_order or 0,
                    items=tuple(item.to_item() for item in opt.offer_option_items),
                    description=opt.description,
                )
                for opt in options
            ),
            vat_rate=to_decimal(self.vat_rate, default_vat_rate),
            hide_unit_prices=bool(self.hide_unit_prices),
        )

    def to_record(self, default_vat_rate: Decimal) -> OfferRecord:
        return OfferRecord(
            id=self.id,
            offer_number=self.offer_number,
            status=self.status,
            catalog=self.to_catalog(default_vat_rate),
            selected_state=self.selected_state if isinstance(self.selected_state, dict) else None,
            totals=OfferTotals(net=to_decimal(self.total_net), gross=to_decimal(self.total_gross)),
            valid_until=_as_utc_datetime(self.valid_until),
            approved_at=_as_utc_datetime(self.approved_at),
            customer_name=self.customer_data.name if self.customer_data else None,
            instance_id=self.instance_id,
        )


def _as_utc_datetime(value: datetime | date | None) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
