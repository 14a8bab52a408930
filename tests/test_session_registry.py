"""
Tests for keeping, reloading and evicting open offer sessions.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from conftest import build_offer
from offerflow.application.use_cases.confirm_offer import ConfirmOfferUseCase
from offerflow.application.use_cases.open_offer import OpenOfferUseCase
from offerflow.domain.entities.catalog import OfferItem
from offerflow.infrastructure.store.memory_store import MemoryOfferStore
from offerflow.infrastructure.store.session_registry import OfferSessionRegistry


@pytest.fixture
def store():
    return MemoryOfferStore([build_offer(), build_offer(id="offer-2"), build_offer(id="offer-3")])


def _registry(store, **kwargs) -> OfferSessionRegistry:
    return OfferSessionRegistry(OpenOfferUseCase(store, ConfirmOfferUseCase(store)), **kwargs)


def _reprice_standard(store, price: str) -> None:
    offer = store.get_offer("offer-1")
    options = tuple(
        replace(option, items=(OfferItem(id="standard-1", name="Standard film", unit_price=Decimal(price)),))
        if option.id == "standard"
        else option
        for option in offer.catalog.options
    )
    store.add_offer(replace(offer, catalog=replace(offer.catalog, options=options)))


def test_active_session_is_reused(store):
    registry = _registry(store, idle_seconds=60)
    first = registry.get_or_open("offer-1", now_ts=1000.0)
    first.toggle_optional_item("addon-50")

    again = registry.get_or_open("offer-1", now_ts=1050.0)

    assert again is first
    assert again.state.selected_optional_items == {"addon-50": True}


def test_idle_session_is_reloaded_with_current_catalog(store):
    registry = _registry(store, idle_seconds=60)
    first = registry.get_or_open("offer-1", now_ts=1000.0)
    _reprice_standard(store, "1100")

    reloaded = registry.get_or_open("offer-1", now_ts=1061.0)

    assert reloaded is not first
    assert reloaded.totals().net == Decimal("1100")


def test_closed_session_is_loaded_again(store):
    registry = _registry(store)
    first = registry.get_or_open("offer-1")

    registry.close("offer-1")

    assert len(registry) == 0
    assert registry.get_or_open("offer-1") is not first


def test_least_recently_used_session_is_evicted(store):
    registry = _registry(store, max_sessions=2)
    touched = registry.get_or_open("offer-1", now_ts=1.0)
    untouched = registry.get_or_open("offer-2", now_ts=2.0)
    registry.get_or_open("offer-1", now_ts=3.0)

    registry.get_or_open("offer-3", now_ts=4.0)

    assert len(registry) == 2
    assert registry.get_or_open("offer-1", now_ts=5.0) is touched
    assert registry.get_or_open("offer-2", now_ts=6.0) is not untouched
