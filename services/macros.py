"""Quick-set presets that move an item's features to a typical Hubble class."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from models.feature_vector import ArmTightness, BarStrength


@dataclass(frozen=True)
class Macro:
    """Literal feature patch plus an optional final label to pin.

    ``final_label`` of None leaves the item's current override untouched.
    """

    name: str
    patch: Mapping[str, Any] = field(default_factory=dict)
    final_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "patch": {k: (v.value if hasattr(v, "value") else v) for k, v in self.patch.items()},
            "final_label": self.final_label,
        }


ELLIPTICAL_SHAPE: Dict[str, Any] = {
    "arm_tightness": ArmTightness.NONE,
    "bar_strength": BarStrength.NONE,
    "bulge_prominence": 80,
    "lenticular_likelihood": 10,
}

_SPIRAL_SHAPES = {
    "a": {"arm_tightness": ArmTightness.TIGHT, "bulge_prominence": 70, "lenticular_likelihood": 20},
    "b": {"arm_tightness": ArmTightness.MODERATE, "bulge_prominence": 50, "lenticular_likelihood": 20},
    "c": {"arm_tightness": ArmTightness.LOOSE, "bulge_prominence": 25, "lenticular_likelihood": 10},
}


def _build_catalog() -> Dict[str, Macro]:
    catalog: Dict[str, Macro] = {
        "Elliptical": Macro("Elliptical", {**ELLIPTICAL_SHAPE, "is_irregular": False}),
        "S0": Macro(
            "S0",
            {
                "arm_tightness": ArmTightness.NONE,
                "bar_strength": BarStrength.NONE,
                "bulge_prominence": 70,
                "lenticular_likelihood": 85,
                "is_irregular": False,
            },
            final_label="S0",
        ),
    }
    for prefix, bar in (("S", BarStrength.NONE), ("SB", BarStrength.STRONG)):
        for stage, shape in _SPIRAL_SHAPES.items():
            name = prefix + stage
            catalog[name] = Macro(name, {**shape, "bar_strength": bar, "is_irregular": False}, final_label=name)
    catalog["Irr"] = Macro("Irr", {"is_irregular": True}, final_label="Irr")
    return catalog


MACROS: Dict[str, Macro] = _build_catalog()


def get_macro(name: str) -> Macro:
    """Return the macro called ``name`` or raise KeyError."""
    try:
        return MACROS[name]
    except KeyError:
        raise KeyError(f"Unknown macro {name!r}") from None
