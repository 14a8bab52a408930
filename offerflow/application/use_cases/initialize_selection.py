from __future__ import annotations

import logging

from offerflow.domain.entities.catalog import OfferCatalog
from offerflow.domain.entities.selection_state import SelectionState
from offerflow.domain.entities.snapshot import CurrentSnapshot, LegacySnapshot, Snapshot


logger = logging.getLogger(__name__)


def initialize_selection(catalog: OfferCatalog, snapshot: Snapshot | None) -> SelectionState:
    """
    Build the selection shown when an offer is opened.

    Without a snapshot every scope gets its first variant (lowest sort order) and the first
    non-extras scope becomes active. A snapshot is restored as-is, except that the active and
    extras scopes always end up with a real variant of their own. Older formats are then
    migrated: whole-upsell flags become per-item toggles, and multi-item options that never
    recorded a mandatory pick fall back to their first mandatory item.
    """
    if snapshot is None:
        return _fresh_selection(catalog)

    if isinstance(snapshot, LegacySnapshot):
        current = snapshot.current
        optional_items = _migrate_upsell_flags(catalog, current, snapshot.selected_upsells)
    else:
        current = snapshot
        optional_items = dict(current.selected_optional_items)

    active_scope_id = _known_scope(catalog, current.selected_scope_id)
    return SelectionState(
        active_scope_id=active_scope_id,
        chosen_options=_with_default_variants(catalog, current.selected_variants, active_scope_id),
        selected_optional_items=optional_items,
        chosen_mandatory_items=_with_default_mandatory_items(catalog, current.selected_item_in_option),
    )


def _fresh_selection(catalog: OfferCatalog) -> SelectionState:
    chosen_options: dict[str, str] = {}
    active_scope_id: str | None = None
    for scope in catalog.scopes:
        variants = catalog.variants(scope.id)
        if not variants:
            continue
        chosen_options[scope.id] = variants[0].id
        if active_scope_id is None and not scope.is_extras:
            active_scope_id = scope.id

    return SelectionState(
        active_scope_id=active_scope_id,
        chosen_options=chosen_options,
        selected_optional_items={},
        chosen_mandatory_items=_with_default_mandatory_items(catalog, {}),
    )


def _known_scope(catalog: OfferCatalog, scope_id: str | None) -> str | None:
    scope = catalog.find_scope(scope_id)
    if scope is None or scope.is_extras:
        if scope_id is not None:
            logger.warning("Dropping unusable active scope from snapshot", extra={"scope_id": scope_id})
        return None
    return scope.id


def _with_default_variants(
    catalog: OfferCatalog,
    saved: dict[str, str],
    active_scope_id: str | None,
) -> dict[str, str]:
    """
    Replace saved variants that no longer belong to their scope and fill the active and
    extras scopes when nothing usable was saved. Other scopes stay absent.
    """
    merged = dict(saved)
    for scope in catalog.scopes:
        variants = catalog.variants(scope.id)
        if not variants:
            merged.pop(scope.id, None)
            continue
        if scope.id not in merged and scope.id != active_scope_id and not scope.is_extras:
            continue
        if merged.get(scope.id) not in {option.id for option in variants}:
            merged[scope.id] = variants[0].id
    return merged


def _migrate_upsell_flags(
    catalog: OfferCatalog,
    current: CurrentSnapshot,
    selected_upsells: dict[str, bool],
) -> dict[str, bool]:
    merged = dict(current.selected_optional_items)
    for option in catalog.options:
        if not option.is_upsell or not selected_upsells.get(option.id):
            continue
        # Per-item data for this upsell wins over the coarse flag.
        if any(item.id in current.selected_optional_items for item in option.items):
            continue
        for item in option.items:
            merged[item.id] = True
        logger.info("Migrated legacy upsell selection", extra={"option_id": option.id})
    return merged


def _with_default_mandatory_items(catalog: OfferCatalog, saved: dict[str, str]) -> dict[str, str]:
    merged = dict(saved)
    for option in catalog.options:
        if not option.has_mandatory_choice:
            continue
        mandatory_ids = {item.id for item in option.mandatory_items}
        if merged.get(option.id) not in mandatory_ids:
            merged[option.id] = option.mandatory_items[0].id
    return merged
