"""Morphological feature vector attached to every annotated galaxy image."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type


class ArmTightness(str, Enum):
    """How tightly the spiral arms are wound."""

    NONE = "None"
    TIGHT = "Tight"
    MODERATE = "Moderate"
    LOOSE = "Loose"


class BarStrength(str, Enum):
    """Strength of a central bar."""

    NONE = "None"
    WEAK = "Weak"
    STRONG = "Strong"


# field -> (min, max)
INT_RANGES: Dict[str, Tuple[int, int]] = {
    "bulge_prominence": (0, 100),
    "elliptical_index": (0, 7),
    "lenticular_likelihood": (0, 100),
}
ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "arm_tightness": ArmTightness,
    "bar_strength": BarStrength,
}
BOOL_FIELDS = ("has_ring", "is_irregular")

# Interchange (camelCase) name -> attribute name
CAMEL_TO_FIELD: Dict[str, str] = {
    "bulgeProminence": "bulge_prominence",
    "armTightness": "arm_tightness",
    "barStrength": "bar_strength",
    "hasRing": "has_ring",
    "isIrregular": "is_irregular",
    "ellipticalIndex": "elliptical_index",
    "lenticularLikelihood": "lenticular_likelihood",
}
FIELD_TO_CAMEL: Dict[str, str] = {v: k for k, v in CAMEL_TO_FIELD.items()}


def clamp_int(value: Any, low: int, high: int) -> Optional[int]:
    """Round and clamp ``value`` into ``[low, high]``.

    Returns None when the value cannot be used (NaN, None, bools, non-numbers),
    in which case callers keep the previous value.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if math.isinf(value):
            return high if value > 0 else low
        value = int(round(value))
    return max(low, min(high, int(value)))


def coerce_enum(enum_cls: Type[Enum], value: Any) -> Optional[Enum]:
    """Return the enum member for ``value`` (member or case-insensitive string)."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        # JSON null for "no arms"/"no bar"
        return enum_cls("None")
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member
    return None


_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


def coerce_bool(value: Any) -> Optional[bool]:
    """Return a flag for bools, 0/1 numbers and "true"/"false" strings, else None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        wanted = value.strip().lower()
        if wanted in _TRUE_STRINGS:
            return True
        if wanted in _FALSE_STRINGS:
            return False
    return None


@dataclass
class FeatureVector:
    """Manually adjusted morphological attributes.

    Attributes:
        bulge_prominence: 0 = no central bulge, 100 = bulge dominates.
        arm_tightness: Winding of the spiral arms.
        bar_strength: Strength of a central bar.
        has_ring: Whether an inner ring is visible.
        is_irregular: Irregular morphology; overrides every other signal.
        elliptical_index: Apparent flattening 0..7 (used for elliptical labels).
        lenticular_likelihood: 0..100, higher means more likely S0.
    """

    bulge_prominence: int = 50
    arm_tightness: ArmTightness = ArmTightness.MODERATE
    bar_strength: BarStrength = BarStrength.NONE
    has_ring: bool = False
    is_irregular: bool = False
    elliptical_index: int = 2
    lenticular_likelihood: int = 30

    def __post_init__(self) -> None:
        # Normalise constructor input through the same clamping rules as patches.
        defaults = FeatureVector.__dataclass_fields__
        for name, (low, high) in INT_RANGES.items():
            clamped = clamp_int(getattr(self, name), low, high)
            setattr(self, name, defaults[name].default if clamped is None else clamped)
        for name, enum_cls in ENUM_FIELDS.items():
            member = coerce_enum(enum_cls, getattr(self, name))
            setattr(self, name, defaults[name].default if member is None else member)
        for name in BOOL_FIELDS:
            flag = coerce_bool(getattr(self, name))
            setattr(self, name, defaults[name].default if flag is None else flag)

    def apply_patch(self, patch: Mapping[str, Any]) -> None:
        """Merge ``patch`` into this vector in place, clamping every value.

        Keys may be attribute names or their camelCase equivalents; unknown
        keys and unusable values are skipped without rejecting the patch.
        """
        for key, value in patch.items():
            name = CAMEL_TO_FIELD.get(key, key)
            if name in INT_RANGES:
                low, high = INT_RANGES[name]
                clamped = clamp_int(value, low, high)
                if clamped is not None:
                    setattr(self, name, clamped)
            elif name in ENUM_FIELDS:
                member = coerce_enum(ENUM_FIELDS[name], value)
                if member is not None:
                    setattr(self, name, member)
            elif name in BOOL_FIELDS:
                flag = coerce_bool(value)
                if flag is not None:
                    setattr(self, name, flag)

    def copy(self) -> "FeatureVector":
        return FeatureVector(**asdict(self))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys and enum values as strings."""
        return {
            FIELD_TO_CAMEL[name]: (value.value if isinstance(value, Enum) else value)
            for name, value in asdict(self).items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeatureVector":
        vector = cls()
        vector.apply_patch(data)
        return vector
