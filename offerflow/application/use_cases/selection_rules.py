from __future__ import annotations

import logging

from offerflow.application.exceptions import CatalogReferenceError
from offerflow.domain.entities.catalog import OfferCatalog, OfferOption, OfferScope
from offerflow.domain.entities.selection_state import SelectionState


logger = logging.getLogger(__name__)


def choose_option(catalog: OfferCatalog, state: SelectionState, scope_id: str, option_id: str) -> SelectionState:
    """
    Make `option_id` the chosen variant of `scope_id` and activate that scope.

    Add-ons chosen under another scope are dropped: only toggles inside the new scope's
    family (chosen variant and its upsells) and inside extras scopes survive.
    """
    scope = _require_scope(catalog, scope_id)
    option = _require_option(catalog, option_id)
    if scope.is_extras:
        raise CatalogReferenceError(f"Scope {scope_id} is an extras scope and cannot be activated")
    if option.scope_id != scope_id or option.is_upsell:
        raise CatalogReferenceError(f"Option {option_id} is not a variant of scope {scope_id}")

    chosen_options = {
        key: value
        for key, value in state.chosen_options.items()
        if key != scope_id and _is_extras_scope(catalog, key)
    }
    chosen_options[scope_id] = option_id

    kept_item_ids = _family_item_ids(catalog, scope_id, option) | _extras_item_ids(catalog)
    selected_optional_items = {
        item_id: value
        for item_id, value in state.selected_optional_items.items()
        if item_id in kept_item_ids
    }

    logger.info("Option chosen", extra={"scope_id": scope_id, "option_id": option_id})
    return SelectionState(
        active_scope_id=scope_id,
        chosen_options=chosen_options,
        selected_optional_items=selected_optional_items,
        chosen_mandatory_items=dict(state.chosen_mandatory_items),
    )


def toggle_optional_item(catalog: OfferCatalog, state: SelectionState, item_id: str) -> SelectionState:
    if catalog.find_item_owner(item_id) is None:
        raise CatalogReferenceError(f"Unknown item id: {item_id}")

    selected_optional_items = dict(state.selected_optional_items)
    selected_optional_items[item_id] = not state.is_item_selected(item_id)
    return SelectionState(
        active_scope_id=state.active_scope_id,
        chosen_options=dict(state.chosen_options),
        selected_optional_items=selected_optional_items,
        chosen_mandatory_items=dict(state.chosen_mandatory_items),
    )


def choose_mandatory_item(
    catalog: OfferCatalog,
    state: SelectionState,
    option_id: str,
    item_id: str,
) -> SelectionState:
    """Pick one line of a multi-item option. Items outside its mandatory group are ignored."""
    option = _require_option(catalog, option_id)
    if catalog.find_item_owner(item_id) is None:
        raise CatalogReferenceError(f"Unknown item id: {item_id}")

    if item_id not in {item.id for item in option.mandatory_items}:
        logger.warning(
            "Ignoring mandatory pick outside option",
            extra={"option_id": option_id, "item_id": item_id},
        )
        return state

    chosen_mandatory_items = dict(state.chosen_mandatory_items)
    chosen_mandatory_items[option_id] = item_id
    return SelectionState(
        active_scope_id=state.active_scope_id,
        chosen_options=dict(state.chosen_options),
        selected_optional_items=dict(state.selected_optional_items),
        chosen_mandatory_items=chosen_mandatory_items,
    )


def _require_scope(catalog: OfferCatalog, scope_id: str) -> OfferScope:
    scope = catalog.find_scope(scope_id)
    if scope is None:
        raise CatalogReferenceError(f"Unknown scope id: {scope_id}")
    return scope


def _require_option(catalog: OfferCatalog, option_id: str) -> OfferOption:
    option = catalog.find_option(option_id)
    if option is None:
        raise CatalogReferenceError(f"Unknown option id: {option_id}")
    return option


def _is_extras_scope(catalog: OfferCatalog, scope_id: str) -> bool:
    scope = catalog.find_scope(scope_id)
    return bool(scope and scope.is_extras)


def _family_item_ids(catalog: OfferCatalog, scope_id: str, option: OfferOption) -> set[str]:
    item_ids = {item.id for item in option.items}
    for upsell in catalog.upsells(scope_id):
        item_ids.update(item.id for item in upsell.items)
    return item_ids


def _extras_item_ids(catalog: OfferCatalog) -> set[str]:
    return {item.id for option in catalog.extras_options() for item in option.items}
