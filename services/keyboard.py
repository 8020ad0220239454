"""Single-key commands routed onto the quick-set macro catalog."""

from __future__ import annotations

from typing import Optional

from models.annotated_item import AnnotatedItem
from models.feature_vector import BarStrength
from services.macros import ELLIPTICAL_SHAPE, Macro, get_macro

BAR_CYCLE = {
    BarStrength.NONE: BarStrength.STRONG,
    BarStrength.STRONG: BarStrength.WEAK,
    BarStrength.WEAK: BarStrength.NONE,
}
SPIRAL_CYCLE = ("S0", "Sa", "Sb", "Sc")


def next_spiral_label(current: str) -> str:
    """Return the label after ``current`` in the S0 -> Sa -> Sb -> Sc cycle."""
    if current not in SPIRAL_CYCLE:
        return SPIRAL_CYCLE[0]
    return SPIRAL_CYCLE[(SPIRAL_CYCLE.index(current) + 1) % len(SPIRAL_CYCLE)]


def resolve_key(key: str, item: AnnotatedItem) -> Optional[Macro]:
    """Translate a key press on ``item`` into a macro, or None if unbound.

    Toggles depend on the item's current features, so the returned macro is
    only valid for the state it was resolved against.
    """
    key = (key or "").strip().lower()
    if len(key) != 1:
        return None

    if key in "01234567":
        return Macro(f"key:{key}", {**ELLIPTICAL_SHAPE, "elliptical_index": int(key)})
    if key == "b":
        return Macro("key:b", {"bar_strength": BAR_CYCLE[item.features.bar_strength]})
    if key == "r":
        return Macro("key:r", {"has_ring": not item.features.has_ring})
    if key == "i":
        return Macro("key:i", {"is_irregular": not item.features.is_irregular})
    if key == "s":
        return get_macro(next_spiral_label(item.final_label))
    return None
