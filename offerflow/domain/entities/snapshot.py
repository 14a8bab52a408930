from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CurrentSnapshot:
    """Persisted selection in the per-item format."""

    selected_scope_id: str | None = None
    selected_variants: dict[str, str] = field(default_factory=dict)
    selected_optional_items: dict[str, bool] = field(default_factory=dict)
    selected_item_in_option: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LegacySnapshot:
    """
    Persisted selection that still carries the per-option upsell flags.
    Current-format fields may be partially present and are kept alongside.
    """

    current: CurrentSnapshot = CurrentSnapshot()
    selected_upsells: dict[str, bool] = field(default_factory=dict)


Snapshot = CurrentSnapshot | LegacySnapshot
