from __future__ import annotations

import itertools

import pytest

from models.feature_vector import ArmTightness, BarStrength, FeatureVector
from services.classifier import HUBBLE_LABELS, classify, spiral_stage


def make(**overrides) -> FeatureVector:
    base = dict(
        bulge_prominence=50,
        arm_tightness=ArmTightness.MODERATE,
        bar_strength=BarStrength.NONE,
        has_ring=False,
        is_irregular=False,
        elliptical_index=0,
        lenticular_likelihood=30,
    )
    base.update(overrides)
    return FeatureVector(**base)


def test_reference_elliptical() -> None:
    features = make(
        bulge_prominence=80,
        arm_tightness=ArmTightness.NONE,
        elliptical_index=3,
        lenticular_likelihood=10,
    )
    assert classify(features) == "E3"


def test_reference_ringed_lenticular() -> None:
    features = make(
        bulge_prominence=60,
        arm_tightness=ArmTightness.NONE,
        lenticular_likelihood=85,
        has_ring=True,
    )
    assert classify(features) == "(R)S0"


def test_reference_early_spiral() -> None:
    features = make(bulge_prominence=70, arm_tightness=ArmTightness.TIGHT, lenticular_likelihood=20)
    assert classify(features) == "Sa"


def test_reference_late_barred_spiral() -> None:
    features = make(
        bulge_prominence=25,
        arm_tightness=ArmTightness.LOOSE,
        bar_strength=BarStrength.STRONG,
        lenticular_likelihood=10,
    )
    assert classify(features) == "SBc"


@pytest.mark.parametrize("arms", list(ArmTightness))
@pytest.mark.parametrize("bar", list(BarStrength))
def test_irregular_overrides_everything(arms: ArmTightness, bar: BarStrength) -> None:
    features = make(
        is_irregular=True,
        arm_tightness=arms,
        bar_strength=bar,
        bulge_prominence=90,
        lenticular_likelihood=95,
        has_ring=True,
    )
    assert classify(features) == "Irr"


def test_lenticular_without_ring() -> None:
    features = make(arm_tightness=ArmTightness.TIGHT, lenticular_likelihood=60)
    assert classify(features) == "S0"


def test_elliptical_needs_low_lenticular_likelihood() -> None:
    features = make(bulge_prominence=80, arm_tightness=ArmTightness.NONE, lenticular_likelihood=40)
    # Falls through the elliptical rule, misses the lenticular threshold, lands in the spiral branch.
    assert classify(features) == "Sb"


def test_bar_blocks_elliptical() -> None:
    features = make(
        bulge_prominence=80,
        arm_tightness=ArmTightness.NONE,
        bar_strength=BarStrength.WEAK,
        lenticular_likelihood=10,
    )
    # openness = 20 + 60 = 80 -> stage b
    assert classify(features) == "SBb"


def test_moderate_arms_never_lenticular() -> None:
    features = make(arm_tightness=ArmTightness.MODERATE, lenticular_likelihood=100, bulge_prominence=100)
    assert classify(features) == "Sa"  # openness 0 + 30


@pytest.mark.parametrize(
    "bulge, arms, stage",
    [
        (41, ArmTightness.TIGHT, "a"),  # openness 59
        (40, ArmTightness.TIGHT, "b"),  # 60
        (20, ArmTightness.MODERATE, "b"),  # 110
        (19, ArmTightness.MODERATE, "c"),  # 111
        (50, ArmTightness.LOOSE, "b"),  # 110
        (49, ArmTightness.NONE, "c"),  # 111
    ],
)
def test_spiral_stage_thresholds(bulge: int, arms: ArmTightness, stage: str) -> None:
    assert spiral_stage(make(bulge_prominence=bulge, arm_tightness=arms)) == stage


def test_unbarred_spiral_with_no_arms_is_late_type() -> None:
    features = make(bulge_prominence=30, arm_tightness=ArmTightness.NONE, lenticular_likelihood=10)
    assert classify(features) == "Sc"


def test_classify_is_deterministic_and_total() -> None:
    grid = itertools.product(
        (0, 39, 40, 59, 60, 100),
        list(ArmTightness),
        list(BarStrength),
        (False, True),
        (0, 39, 40, 59, 60, 100),
        (0, 7),
    )
    for bulge, arms, bar, ring, lenticular, index in grid:
        features = make(
            bulge_prominence=bulge,
            arm_tightness=arms,
            bar_strength=bar,
            has_ring=ring,
            lenticular_likelihood=lenticular,
            elliptical_index=index,
        )
        first = classify(features)
        assert first in HUBBLE_LABELS
        assert all(classify(features.copy()) == first for _ in range(3))
