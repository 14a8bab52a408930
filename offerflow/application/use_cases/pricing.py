from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal

from offerflow.domain.entities.catalog import OfferCatalog, OfferItem, OfferOption
from offerflow.domain.entities.selection_state import SelectionState
from offerflow.domain.entities.totals import OfferTotals, PricedLine, SelectionBreakdown

HUNDRED = Decimal("100")


def line_price(item: OfferItem) -> Decimal:
    return item.quantity * item.unit_price * (1 - item.discount_percent / HUNDRED)


def gross_from_net(net: Decimal, vat_rate: Decimal) -> Decimal:
    return net * (1 + vat_rate / HUNDRED)


def compute_totals(catalog: OfferCatalog, state: SelectionState) -> OfferTotals:
    """
    Net and gross of the current selection, recomputed from scratch.

    Counted lines: the active scope's chosen variant (optional lines only when toggled,
    one line of a multi-item mandatory group), toggled lines of that scope's upsells and
    toggled lines of every extras scope. Nothing is rounded here.
    """
    net = sum((line_price(item) for _, item in _included_lines(catalog, state)), Decimal("0"))
    return OfferTotals(net=net, gross=gross_from_net(net, catalog.vat_rate))


def selection_breakdown(catalog: OfferCatalog, state: SelectionState) -> SelectionBreakdown:
    """Included lines with their prices and per-option subtotals, for summaries."""
    lines: list[PricedLine] = []
    option_subtotals: dict[str, Decimal] = {}
    for option, item in _included_lines(catalog, state):
        price = line_price(item)
        lines.append(
            PricedLine(
                scope_id=option.scope_id,
                option_id=option.id,
                item_id=item.id,
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount_percent=item.discount_percent,
                line_net=price,
                is_optional=item.is_optional,
            )
        )
        option_subtotals[option.id] = option_subtotals.get(option.id, Decimal("0")) + price

    net = sum((line.line_net for line in lines), Decimal("0"))
    return SelectionBreakdown(
        totals=OfferTotals(net=net, gross=gross_from_net(net, catalog.vat_rate)),
        lines=tuple(lines),
        option_subtotals=option_subtotals,
    )


def variant_price(option: OfferOption, state: SelectionState) -> Decimal:
    """Net price of a variant as it would count if chosen, for listing competing variants."""
    return sum((line_price(item) for item in _variant_lines(option, state)), Decimal("0"))


def resolve_mandatory_choice(option: OfferOption, state: SelectionState) -> OfferItem | None:
    """The picked line of a multi-item mandatory group; the first one if nothing valid is recorded."""
    mandatory = option.mandatory_items
    if not mandatory:
        return None
    chosen_id = state.chosen_mandatory_items.get(option.id)
    for item in mandatory:
        if item.id == chosen_id:
            return item
    return mandatory[0]


def _included_lines(catalog: OfferCatalog, state: SelectionState) -> Iterator[tuple[OfferOption, OfferItem]]:
    active_scope = catalog.find_scope(state.active_scope_id)
    if active_scope is not None and not active_scope.is_extras:
        option = catalog.find_option(state.chosen_option_id(active_scope.id))
        if option is not None:
            for item in _variant_lines(option, state):
                yield option, item

        for upsell in catalog.upsells(active_scope.id):
            for item in upsell.items:
                if state.is_item_selected(item.id):
                    yield upsell, item

    for option in catalog.extras_options():
        for item in option.items:
            if state.is_item_selected(item.id):
                yield option, item


def _variant_lines(option: OfferOption, state: SelectionState) -> Iterator[OfferItem]:
    picked = resolve_mandatory_choice(option, state) if option.has_mandatory_choice else None
    for item in option.items:
        if item.is_optional:
            if state.is_item_selected(item.id):
                yield item
        elif picked is not None:
            if item.id == picked.id:
                yield item
        else:
            yield item
