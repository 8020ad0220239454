"""Deterministic Hubble-type suggestion from a feature vector.

Rules are evaluated in a fixed priority and the first match wins:

1. irregular morphology -> ``Irr``
2. no arms, no bar, dominant bulge, low S0 likelihood -> ``E0``..``E7``
3. high S0 likelihood with no or tight arms -> ``S0`` / ``(R)S0``
4. otherwise a spiral whose stage follows from bulge size and arm winding
"""

from __future__ import annotations

from typing import List

from models.feature_vector import ArmTightness, BarStrength, FeatureVector

ELLIPTICAL_LABELS: List[str] = [f"E{idx}" for idx in range(8)]
SPIRAL_LABELS: List[str] = ["Sa", "Sb", "Sc", "SBa", "SBb", "SBc"]
HUBBLE_LABELS: List[str] = ELLIPTICAL_LABELS + ["S0", "(R)S0"] + SPIRAL_LABELS + ["Irr"]

ELLIPTICAL_MIN_BULGE = 60
ELLIPTICAL_MAX_LENTICULAR = 40
LENTICULAR_MIN_LIKELIHOOD = 60

ARM_PENALTY = {
    ArmTightness.TIGHT: 0,
    ArmTightness.MODERATE: 30,
    ArmTightness.LOOSE: 60,
    ArmTightness.NONE: 60,
}
STAGE_A_BELOW = 60
STAGE_C_ABOVE = 110


def spiral_stage(features: FeatureVector) -> str:
    """Return the spiral stage letter (``a``, ``b`` or ``c``)."""
    openness = (100 - features.bulge_prominence) + ARM_PENALTY[features.arm_tightness]
    if openness < STAGE_A_BELOW:
        return "a"
    if openness > STAGE_C_ABOVE:
        return "c"
    return "b"


def classify(features: FeatureVector) -> str:
    """Map ``features`` to a Hubble label. Pure and total."""
    if features.is_irregular:
        return "Irr"

    no_arms = features.arm_tightness == ArmTightness.NONE
    no_bar = features.bar_strength == BarStrength.NONE

    if (
        no_arms
        and no_bar
        and features.bulge_prominence >= ELLIPTICAL_MIN_BULGE
        and features.lenticular_likelihood < ELLIPTICAL_MAX_LENTICULAR
    ):
        index = max(0, min(7, int(round(features.elliptical_index))))
        return f"E{index}"

    if features.lenticular_likelihood >= LENTICULAR_MIN_LIKELIHOOD and features.arm_tightness in (
        ArmTightness.NONE,
        ArmTightness.TIGHT,
    ):
        return "(R)S0" if features.has_ring else "S0"

    prefix = "S" if no_bar else "SB"
    return prefix + spiral_stage(features)
