from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OfferScope:
    id: str
    name: str
    is_extras: bool = False
    description: str | None = None


@dataclass(frozen=True)
class OfferItem:
    id: str
    name: str
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    discount_percent: Decimal = Decimal("0")  # 0-100
    is_optional: bool = False
    unit: str = "szt."
    description: str | None = None


@dataclass(frozen=True)
class OfferOption:
    id: str
    name: str
    scope_id: str | None = None
    is_upsell: bool = False
    sort_order: int = 0
    items: tuple[OfferItem, ...] = ()
    description: str | None = None

    @property
    def mandatory_items(self) -> tuple[OfferItem, ...]:
        return tuple(item for item in self.items if not item.is_optional)

    @property
    def has_mandatory_choice(self) -> bool:
        """True when the mandatory items form a single-select group."""
        return len(self.mandatory_items) > 1


@dataclass(frozen=True)
class OfferCatalog:
    """Read-only scope -> option -> item tree of one offer."""

    scopes: tuple[OfferScope, ...]
    options: tuple[OfferOption, ...]
    vat_rate: Decimal = Decimal("23")
    hide_unit_prices: bool = False
    _scopes_by_id: dict[str, OfferScope] = field(init=False, repr=False, compare=False)
    _options_by_id: dict[str, OfferOption] = field(init=False, repr=False, compare=False)
    _item_owner: dict[str, OfferOption] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        item_owner: dict[str, OfferOption] = {}
        for option in self.options:
            for item in option.items:
                item_owner[item.id] = option
        object.__setattr__(self, "_scopes_by_id", {scope.id: scope for scope in self.scopes})
        object.__setattr__(self, "_options_by_id", {option.id: option for option in self.options})
        object.__setattr__(self, "_item_owner", item_owner)

    def find_scope(self, scope_id: str | None) -> OfferScope | None:
        if scope_id is None:
            return None
        return self._scopes_by_id.get(scope_id)

    def find_option(self, option_id: str | None) -> OfferOption | None:
        if option_id is None:
            return None
        return self._options_by_id.get(option_id)

    def find_item_owner(self, item_id: str) -> OfferOption | None:
        return self._item_owner.get(item_id)

    def is_extras_option(self, option: OfferOption) -> bool:
        scope = self.find_scope(option.scope_id)
        return bool(scope and scope.is_extras)

    def variants(self, scope_id: str) -> list[OfferOption]:
        """Competing (non-upsell) options of a scope, by sort order."""
        options = [opt for opt in self.options if opt.scope_id == scope_id and not opt.is_upsell]
        return sorted(options, key=lambda opt: opt.sort_order)

    def upsells(self, scope_id: str) -> list[OfferOption]:
        return [opt for opt in self.options if opt.is_upsell and opt.scope_id == scope_id]

    def extras_options(self) -> list[OfferOption]:
        return [opt for opt in self.options if self.is_extras_option(opt)]
