from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SelectionState:
    active_scope_id: str | None = None
    chosen_options: dict[str, str] = field(default_factory=dict)  # scope_id -> option_id
    selected_optional_items: dict[str, bool] = field(default_factory=dict)  # item_id -> on/off
    chosen_mandatory_items: dict[str, str] = field(default_factory=dict)  # option_id -> item_id

    def is_item_selected(self, item_id: str) -> bool:
        return bool(self.selected_optional_items.get(item_id))

    def chosen_option_id(self, scope_id: str | None) -> str | None:
        if scope_id is None:
            return None
        return self.chosen_options.get(scope_id)
