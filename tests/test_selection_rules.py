"""
Tests for the selection rules: choosing variants, toggling add-ons, picking mandatory lines.
"""

from __future__ import annotations

import pytest

from offerflow.application.exceptions import CatalogReferenceError
from offerflow.application.use_cases.initialize_selection import initialize_selection
from offerflow.application.use_cases.selection_rules import (
    choose_mandatory_item,
    choose_option,
    toggle_optional_item,
)


def test_choose_option_activates_scope(catalog):
    state = initialize_selection(catalog, None)

    state = choose_option(catalog, state, "paint", "premium")

    assert state.active_scope_id == "paint"
    assert state.chosen_options["paint"] == "premium"


def test_switching_scope_drops_previous_add_ons(catalog):
    """Upsells of the previous scope are cleared, extras survive."""
    state = initialize_selection(catalog, None)
    state = toggle_optional_item(catalog, state, "upsell-1")
    state = toggle_optional_item(catalog, state, "addon-50")

    state = choose_option(catalog, state, "wrap", "wrap-basic")

    assert "upsell-1" not in state.selected_optional_items
    assert state.selected_optional_items == {"addon-50": True}


def test_no_item_of_previous_scope_family_stays_selected(catalog):
    state = initialize_selection(catalog, None)
    state = choose_option(catalog, state, "wrap", "wrap-basic")
    for item_id in ("wrap-opt", "wrap-upsell-1", "addon-75"):
        state = toggle_optional_item(catalog, state, item_id)

    state = choose_option(catalog, state, "paint", "standard")

    wrap_items = {item.id for option in catalog.options if option.scope_id == "wrap" for item in option.items}
    selected = {item_id for item_id, on in state.selected_optional_items.items() if on}
    assert not selected & wrap_items
    assert selected == {"addon-75"}


def test_reselecting_within_scope_keeps_its_upsells(catalog):
    state = initialize_selection(catalog, None)
    state = toggle_optional_item(catalog, state, "upsell-1")

    state = choose_option(catalog, state, "paint", "premium")

    assert state.selected_optional_items == {"upsell-1": True}


def test_chosen_variants_are_pruned_to_active_and_extras_scopes(catalog):
    state = initialize_selection(catalog, None)

    state = choose_option(catalog, state, "wrap", "wrap-basic")

    assert state.chosen_options == {"wrap": "wrap-basic", "addons": "addons-opt"}


def test_rules_return_new_state_without_touching_the_old_one(catalog):
    before = initialize_selection(catalog, None)

    after = toggle_optional_item(catalog, before, "upsell-1")
    after = choose_option(catalog, after, "paint", "premium")

    assert before.selected_optional_items == {}
    assert before.chosen_options["paint"] == "standard"
    assert after is not before


def test_toggle_flips_back_and_forth(catalog):
    state = initialize_selection(catalog, None)

    state = toggle_optional_item(catalog, state, "addon-50")
    assert state.selected_optional_items["addon-50"] is True

    state = toggle_optional_item(catalog, state, "addon-50")
    assert state.selected_optional_items["addon-50"] is False


def test_choose_mandatory_item_switches_the_group_pick(catalog):
    state = initialize_selection(catalog, None)

    state = choose_mandatory_item(catalog, state, "wrap-basic", "wrap-b")

    assert state.chosen_mandatory_items["wrap-basic"] == "wrap-b"


def test_choose_mandatory_item_ignores_items_outside_the_group(catalog):
    state = initialize_selection(catalog, None)

    optional_pick = choose_mandatory_item(catalog, state, "wrap-basic", "wrap-opt")
    foreign_pick = choose_mandatory_item(catalog, state, "wrap-basic", "standard-1")

    assert optional_pick is state
    assert foreign_pick is state


@pytest.mark.parametrize(
    "action",
    [
        lambda c, s: choose_option(c, s, "missing", "standard"),
        lambda c, s: choose_option(c, s, "paint", "missing"),
        lambda c, s: choose_option(c, s, "paint", "wrap-basic"),
        lambda c, s: choose_option(c, s, "paint", "paint-upsell"),
        lambda c, s: choose_option(c, s, "addons", "addons-opt"),
        lambda c, s: toggle_optional_item(c, s, "missing"),
        lambda c, s: choose_mandatory_item(c, s, "missing", "wrap-a"),
        lambda c, s: choose_mandatory_item(c, s, "wrap-basic", "missing"),
    ],
)
def test_unknown_or_mismatched_references_fail_fast(catalog, action):
    state = initialize_selection(catalog, None)

    with pytest.raises(CatalogReferenceError):
        action(catalog, state)
