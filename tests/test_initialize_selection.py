"""
Tests for building the initial selection, fresh and from persisted snapshots.
"""

from __future__ import annotations

from offerflow.application.use_cases.initialize_selection import initialize_selection
from offerflow.application.use_cases.pricing import compute_totals
from offerflow.application.utils.snapshot_codec import parse_snapshot
from offerflow.domain.entities.snapshot import CurrentSnapshot, LegacySnapshot


def test_fresh_selection_picks_first_variant_per_scope(catalog):
    """Every scope gets its lowest sort-order variant; the first non-extras scope is active."""
    state = initialize_selection(catalog, None)

    assert state.active_scope_id == "paint"
    assert state.chosen_options == {"paint": "standard", "wrap": "wrap-basic", "addons": "addons-opt"}
    assert state.selected_optional_items == {}


def test_fresh_selection_defaults_mandatory_group_to_first_item(catalog):
    state = initialize_selection(catalog, None)

    assert state.chosen_mandatory_items == {"wrap-basic": "wrap-a"}


def test_snapshot_is_restored_verbatim(catalog):
    snapshot = parse_snapshot(
        {
            "selectedScopeId": "wrap",
            "selectedVariants": {"wrap": "wrap-basic"},
            "selectedOptionalItems": {"wrap-opt": True, "addon-75": True, "addon-50": False},
            "selectedItemInOption": {"wrap-basic": "wrap-b"},
        }
    )
    assert isinstance(snapshot, CurrentSnapshot)

    state = initialize_selection(catalog, snapshot)

    assert state.active_scope_id == "wrap"
    assert state.chosen_options == {"wrap": "wrap-basic", "addons": "addons-opt"}
    assert state.selected_optional_items == {"wrap-opt": True, "addon-75": True, "addon-50": False}
    assert state.chosen_mandatory_items == {"wrap-basic": "wrap-b"}


def test_legacy_upsell_flag_selects_every_item_of_the_upsell(catalog):
    """Old snapshots flagged whole upsell options instead of single items."""
    snapshot = parse_snapshot(
        {
            "selectedScopeId": "paint",
            "selectedVariants": {"paint": "premium"},
            "selectedUpsells": {"paint-upsell": True},
        }
    )
    assert isinstance(snapshot, LegacySnapshot)

    state = initialize_selection(catalog, snapshot)

    assert state.selected_optional_items == {"upsell-1": True}
    totals = compute_totals(catalog, state)
    assert totals.net == 1820


def test_legacy_flag_does_not_override_per_item_choice(catalog):
    snapshot = parse_snapshot(
        {
            "selectedScopeId": "paint",
            "selectedVariants": {"paint": "standard"},
            "selectedOptionalItems": {"upsell-1": False},
            "selectedUpsells": {"paint-upsell": True},
        }
    )

    state = initialize_selection(catalog, snapshot)

    assert state.selected_optional_items == {"upsell-1": False}


def test_missing_mandatory_pick_is_repaired(catalog):
    """Snapshots saved before per-item picks existed get the first mandatory item."""
    snapshot = parse_snapshot(
        {
            "selectedScopeId": "wrap",
            "selectedVariants": {"wrap": "wrap-basic"},
            "selectedOptionalItems": {},
        }
    )

    state = initialize_selection(catalog, snapshot)

    assert state.chosen_mandatory_items == {"wrap-basic": "wrap-a"}
    assert compute_totals(catalog, state).net == 500


def test_malformed_snapshot_fields_are_defaulted(catalog):
    snapshot = parse_snapshot(
        {
            "selectedScopeId": 42,
            "selectedVariants": "paint",
            "selectedOptionalItems": ["upsell-1"],
            "selectedItemInOption": {"wrap-basic": None},
            "selectedUpsells": None,
        }
    )

    state = initialize_selection(catalog, snapshot)

    assert state.active_scope_id is None
    assert state.chosen_options == {"addons": "addons-opt"}
    assert state.selected_optional_items == {}
    assert state.chosen_mandatory_items == {"wrap-basic": "wrap-a"}


def test_non_object_snapshot_starts_fresh(catalog):
    assert parse_snapshot("corrupted") is None
    state = initialize_selection(catalog, parse_snapshot("corrupted"))

    assert state.active_scope_id == "paint"


def test_active_scope_without_saved_variant_gets_first_variant(catalog):
    state = initialize_selection(catalog, parse_snapshot({"selectedScopeId": "paint"}))

    assert state.chosen_options["paint"] == "standard"
    assert compute_totals(catalog, state).net == 1000


def test_variant_missing_from_catalog_is_replaced(catalog):
    """A saved option that was removed, or that belongs to another scope, is not kept."""
    snapshot = parse_snapshot(
        {
            "selectedScopeId": "paint",
            "selectedVariants": {"paint": "retired-option", "wrap": "premium"},
        }
    )

    state = initialize_selection(catalog, snapshot)

    assert state.chosen_options == {"paint": "standard", "wrap": "wrap-basic", "addons": "addons-opt"}
    assert compute_totals(catalog, state).net == 1000


def test_unknown_or_extras_active_scope_is_dropped(catalog):
    for scope_id in ("gone", "addons"):
        state = initialize_selection(catalog, parse_snapshot({"selectedScopeId": scope_id}))

        assert state.active_scope_id is None
