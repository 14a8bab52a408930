from __future__ import annotations

import logging
from typing import Any

from offerflow.domain.entities.selection_state import SelectionState
from offerflow.domain.entities.snapshot import CurrentSnapshot, LegacySnapshot, Snapshot


logger = logging.getLogger(__name__)


def parse_snapshot(raw: Any) -> Snapshot | None:
    """
    Read a persisted selection (camelCase JSON object) into a snapshot variant.
    Malformed fields are dropped rather than raised; a non-object yields None.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Ignoring malformed selection snapshot", extra={"error": type(raw).__name__})
        return None

    current = CurrentSnapshot(
        selected_scope_id=_str_or_none(raw.get("selectedScopeId")),
        selected_variants=_str_map(raw.get("selectedVariants")),
        selected_optional_items=_bool_map(raw.get("selectedOptionalItems")),
        selected_item_in_option=_str_map(raw.get("selectedItemInOption")),
    )

    upsells = _bool_map(raw.get("selectedUpsells"))
    if any(upsells.values()):
        return LegacySnapshot(current=current, selected_upsells=upsells)
    return current


def snapshot_to_dict(state: SelectionState) -> dict[str, Any]:
    """Serialize a selection in the current format. The legacy upsell map is never written."""
    return {
        "selectedScopeId": state.active_scope_id,
        "selectedVariants": dict(state.chosen_options),
        "selectedOptionalItems": {key: bool(value) for key, value in state.selected_optional_items.items()},
        "selectedItemInOption": dict(state.chosen_mandatory_items),
    }


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _str_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {
        str(key): val
        for key, val in value.items()
        if isinstance(val, str) and val
    }


def _bool_map(value: Any) -> dict[str, bool]:
    if not isinstance(value, dict):
        return {}
    return {
        str(key): val
        for key, val in value.items()
        if isinstance(val, bool)
    }
