from __future__ import annotations

import math

import pytest

from models.feature_vector import ArmTightness, BarStrength, FeatureVector, clamp_int


def test_defaults() -> None:
    features = FeatureVector()
    assert features.bulge_prominence == 50
    assert features.arm_tightness is ArmTightness.MODERATE
    assert features.bar_strength is BarStrength.NONE
    assert features.has_ring is False
    assert features.is_irregular is False
    assert features.elliptical_index == 2
    assert features.lenticular_likelihood == 30


@pytest.mark.parametrize("value, expected", [(150, 100), (-10, 0), (100, 100), (0, 0), (55.6, 56)])
def test_bulge_is_clamped(value, expected) -> None:
    features = FeatureVector()
    features.apply_patch({"bulge_prominence": value})
    assert features.bulge_prominence == expected


def test_elliptical_index_is_clamped_to_seven() -> None:
    features = FeatureVector()
    features.apply_patch({"ellipticalIndex": 12, "lenticularLikelihood": -3})
    assert features.elliptical_index == 7
    assert features.lenticular_likelihood == 0


def test_non_finite_values() -> None:
    features = FeatureVector()
    features.apply_patch({"bulge_prominence": math.inf, "lenticular_likelihood": -math.inf})
    assert features.bulge_prominence == 100
    assert features.lenticular_likelihood == 0

    features.apply_patch({"bulge_prominence": math.nan, "elliptical_index": 5})
    assert features.bulge_prominence == 100
    assert features.elliptical_index == 5


def test_unusable_values_keep_previous_and_rest_of_patch_applies() -> None:
    features = FeatureVector()
    features.apply_patch(
        {
            "bulge_prominence": "lots",
            "arm_tightness": "spiky",
            "bar_strength": "strong",
            "has_ring": 1,
            "unknown_field": 3,
        }
    )
    assert features.bulge_prominence == 50
    assert features.arm_tightness is ArmTightness.MODERATE
    assert features.bar_strength is BarStrength.STRONG
    assert features.has_ring is True


def test_null_enum_means_none_member() -> None:
    features = FeatureVector()
    features.apply_patch({"armTightness": None})
    assert features.arm_tightness is ArmTightness.NONE


def test_constructor_clamps() -> None:
    features = FeatureVector(bulge_prominence=500, elliptical_index=-1, arm_tightness="loose")
    assert features.bulge_prominence == 100
    assert features.elliptical_index == 0
    assert features.arm_tightness is ArmTightness.LOOSE


def test_to_dict_round_trip() -> None:
    features = FeatureVector(bar_strength=BarStrength.WEAK, has_ring=True)
    data = features.to_dict()
    assert data["barStrength"] == "Weak"
    assert data["hasRing"] is True
    assert FeatureVector.from_dict(data) == features


def test_clamp_int_rejects_bools_and_none() -> None:
    assert clamp_int(True, 0, 100) is None
    assert clamp_int(None, 0, 100) is None
    assert clamp_int("42", 0, 100) == 42


def test_boolean_strings_are_parsed_and_junk_is_skipped() -> None:
    features = FeatureVector(has_ring=True)
    features.apply_patch({"hasRing": "false", "isIrregular": "TRUE"})
    assert features.has_ring is False
    assert features.is_irregular is True

    features.apply_patch({"hasRing": "maybe", "isIrregular": [], "has_ring": 2})
    assert features.has_ring is False
    assert features.is_irregular is True

    assert FeatureVector(has_ring="no", is_irregular="yes").to_dict()["isIrregular"] is True
    assert FeatureVector(has_ring="sometimes").has_ring is False
