from __future__ import annotations

from typing import Any


def offer_row(**overrides: Any) -> dict[str, Any]:
    """An offer row shaped like the backend's response, with nested options and items."""
    row: dict[str, Any] = {
        "id": "offer-42",
        "offer_number": "2024/042",
        "instance_id": "instance-1",
        "customer_data": {"name": "Jan Kowalski"},
        "status": "sent",
        "total_net": 0,
        "total_gross": 0,
        "vat_rate": 23,
        "hide_unit_prices": False,
        "valid_until": None,
        "approved_at": None,
        "selected_state": None,
        "offer_options": [
            {
                "id": "premium",
                "name": "Premium",
                "is_selected": True,
                "sort_order": 2,
                "scope_id": "paint",
                "is_upsell": False,
                "scope": {"id": "paint", "name": "Paint Protection", "is_extras_scope": False},
                "offer_option_items": [
                    {"id": "premium-1", "custom_name": "Premium film", "quantity": 1, "unit_price": 1800, "discount_percent": 10, "is_optional": False},
                ],
            },
            {
                "id": "standard",
                "name": "Standard",
                "is_selected": True,
                "sort_order": 1,
                "scope_id": "paint",
                "is_upsell": False,
                "scope": {"id": "paint", "name": "Paint Protection", "is_extras_scope": False},
                "offer_option_items": [
                    {"id": "standard-1", "custom_name": "Standard film", "quantity": 1, "unit_price": 1000, "discount_percent": 0, "is_optional": False},
                ],
            },
            {
                "id": "paint-upsell",
                "name": "Paint extras",
                "is_selected": True,
                "sort_order": 3,
                "scope_id": "paint",
                "is_upsell": True,
                "scope": {"id": "paint", "name": "Paint Protection", "is_extras_scope": False},
                "offer_option_items": [
                    {"id": "upsell-1", "custom_name": "Headlight film", "quantity": 1, "unit_price": 200, "discount_percent": 0, "is_optional": True},
                ],
            },
            {
                "id": "addons-opt",
                "name": "Add-ons",
                "is_selected": True,
                "sort_order": 4,
                "scope_id": "addons",
                "is_upsell": False,
                "scope": {"id": "addons", "name": "Add-ons", "is_extras_scope": True},
                "offer_option_items": [
                    {"id": "addon-50", "custom_name": "Interior cleaning", "quantity": 1, "unit_price": 50, "discount_percent": 0, "is_optional": True},
                    {"id": "addon-75", "custom_name": "Rim coating", "quantity": 1, "unit_price": 75, "discount_percent": 0, "is_optional": True},
                ],
            },
            {
                "id": "draft-option",
                "name": "Not offered",
                "is_selected": False,
                "sort_order": 0,
                "scope_id": "hidden",
                "scope": {"id": "hidden", "name": "Hidden", "is_extras_scope": False},
                "offer_option_items": [],
            },
        ],
    }
    row.update(overrides)
    return row
