from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ChooseOptionRequestSchema(BaseModel):
    scope_id: str
    option_id: str


class ToggleOptionalItemRequestSchema(BaseModel):
    item_id: str


class ChooseMandatoryItemRequestSchema(BaseModel):
    option_id: str
    item_id: str


class TotalsSchema(BaseModel):
    total_net: float
    total_gross: float
    vat: float
    formatted_net: str
    formatted_gross: str


class PricedLineSchema(BaseModel):
    option_id: str
    item_id: str
    name: str
    quantity: float
    unit_price: float | None = None  # hidden when the offer hides unit prices
    discount_percent: float
    line_net: float
    is_optional: bool


class OptionViewSchema(BaseModel):
    id: str
    name: str
    is_upsell: bool
    price_net: float
    item_ids: list[str] = Field(default_factory=list)


class ScopeViewSchema(BaseModel):
    id: str
    name: str
    is_extras: bool
    options: list[OptionViewSchema] = Field(default_factory=list)


class OfferViewSchema(BaseModel):
    offer_id: str
    offer_number: str
    status: str
    can_respond: bool
    editing: bool
    responding: bool
    interactions_disabled: bool
    vat_rate: float
    hide_unit_prices: bool
    currency: str
    selection: dict[str, Any]
    totals: TotalsSchema
    lines: list[PricedLineSchema] = Field(default_factory=list)
    option_subtotals: dict[str, float] = Field(default_factory=dict)
    scopes: list[ScopeViewSchema] = Field(default_factory=list)


class ConfirmResponseSchema(BaseModel):
    offer_id: str
    approved_at: datetime
    selection: dict[str, Any]
    totals: TotalsSchema
