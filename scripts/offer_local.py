from __future__ import annotations

#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local offer harness (no HTTP, no backend).

Usage:
  python3 scripts/offer_local.py [offer_id]

What it does:
- Seeds a demo offer into the JSON store when the offer file is missing
- Opens the offer through the same OpenOfferUseCase the API uses
- Applies your commands to the selection and prints lines and totals after each one
"""

import asyncio
import json

try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass

from offerflow.application.exceptions import (
    CatalogReferenceError,
    ConfirmationInProgressError,
    OfferPersistenceError,
    SelectionValidationError,
)
from offerflow.application.use_cases.confirm_offer import ConfirmOfferUseCase
from offerflow.application.use_cases.offer_session import OfferSession
from offerflow.application.use_cases.open_offer import OpenOfferUseCase
from offerflow.application.utils.money import format_money, to_decimal
from offerflow.core.config import settings
from offerflow.infrastructure.notifications.log_notifier import LogNotifier
from offerflow.infrastructure.store.json_store import JsonOfferStore

DEMO_OFFER = {
    "id": "demo",
    "offer_number": "DEMO/1",
    "status": "sent",
    "vat_rate": 23,
    "customer_data": {"name": "Demo Customer"},
    "offer_options": [
        {
            "id": "standard", "name": "Standard", "sort_order": 1, "scope_id": "paint",
            "scope": {"id": "paint", "name": "Paint Protection"},
            "offer_option_items": [{"id": "standard-1", "custom_name": "Standard film", "unit_price": 1000}],
        },
        {
            "id": "premium", "name": "Premium", "sort_order": 2, "scope_id": "paint",
            "scope": {"id": "paint", "name": "Paint Protection"},
            "offer_option_items": [
                {"id": "premium-1", "custom_name": "Premium film", "unit_price": 1800, "discount_percent": 10},
            ],
        },
        {
            "id": "paint-upsell", "name": "Paint extras", "sort_order": 3, "scope_id": "paint", "is_upsell": True,
            "scope": {"id": "paint", "name": "Paint Protection"},
            "offer_option_items": [
                {"id": "upsell-1", "custom_name": "Headlight film", "unit_price": 200, "is_optional": True},
            ],
        },
        {
            "id": "addons-opt", "name": "Add-ons", "sort_order": 4, "scope_id": "addons",
            "scope": {"id": "addons", "name": "Add-ons", "is_extras_scope": True},
            "offer_option_items": [
                {"id": "addon-50", "custom_name": "Interior cleaning", "unit_price": 50, "is_optional": True},
                {"id": "addon-75", "custom_name": "Rim coating", "unit_price": 75, "is_optional": True},
            ],
        },
    ],
}


def _print_help() -> None:
    print("Commands:")
    print("  /option <scope_id> <option_id>   choose a variant")
    print("  /toggle <item_id>                toggle an optional item")
    print("  /pick <option_id> <item_id>      pick a mandatory item")
    print("  /edit, /cancel                   enter or leave edit mode")
    print("  /confirm                         accept the offer")
    print("  /show, /json, /help, /quit")


def _print_session(session: OfferSession) -> None:
    catalog = session.catalog
    breakdown = session.breakdown()
    print("-" * 60)
    print(f"offer: {session.offer.offer_number}  status: {session.offer.status}  editing: {session.editing}")
    for scope in catalog.scopes:
        marker = "*" if scope.id == session.state.active_scope_id else " "
        kind = " (extras)" if scope.is_extras else ""
        print(f"{marker} {scope.name}{kind}")
        for option in catalog.options:
            if option.scope_id != scope.id:
                continue
            chosen = "->" if session.state.chosen_option_id(scope.id) == option.id else "  "
            tag = " [upsell]" if option.is_upsell else ""
            print(f"    {chosen} {option.id}: {option.name}{tag}")
    print("lines:")
    for line in breakdown.lines:
        print(f"    {line.item_id:<16} {line.name:<24} {format_money(line.line_net, settings.CURRENCY)}")
    print(f"net:   {format_money(breakdown.totals.net, settings.CURRENCY)}")
    print(f"gross: {format_money(breakdown.totals.gross, settings.CURRENCY)}")
    print("-" * 60)


def main() -> None:
    offer_id = sys.argv[1] if len(sys.argv) > 1 else "demo"
    store = JsonOfferStore(data_dir=settings.OFFER_DATA_DIR, default_vat_rate=to_decimal(settings.DEFAULT_VAT_RATE))
    if offer_id == "demo" and store.get_offer("demo") is None:
        store.put_offer(DEMO_OFFER)

    use_case = OpenOfferUseCase(store, ConfirmOfferUseCase(store, notifier=LogNotifier()))
    session = use_case.execute(offer_id)
    _print_help()
    _print_session(session)

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        parts = line.split()
        command, args = parts[0], parts[1:]

        try:
            if command == "/quit":
                break
            elif command == "/help":
                _print_help()
                continue
            elif command == "/json":
                print(json.dumps(session.offer.selected_state, indent=2))
                continue
            elif command == "/option" and len(args) == 2:
                session.choose_option(args[0], args[1])
            elif command == "/toggle" and len(args) == 1:
                session.toggle_optional_item(args[0])
            elif command == "/pick" and len(args) == 2:
                session.choose_mandatory_item(args[0], args[1])
            elif command == "/edit":
                session.begin_edit()
            elif command == "/cancel":
                session.cancel_edit()
            elif command == "/confirm":
                result = asyncio.run(session.confirm())
                print(f"Confirmed at {result.approved_at.isoformat()}")
            elif command != "/show":
                print("Unknown command, /help for the list.")
                continue
        except (CatalogReferenceError, SelectionValidationError, ConfirmationInProgressError) as e:
            print(f"Rejected: {e}")
            continue
        except OfferPersistenceError as e:
            print(f"Save failed, try again: {e}")
            continue

        _print_session(session)


if __name__ == "__main__":
    main()
