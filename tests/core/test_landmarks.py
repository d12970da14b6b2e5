"""Tests for facial landmarks and the depth table."""

import math

import pytest

from facetheme.core.landmarks import (
    LANDMARK_DEPTHS, FacialLandmark, LandmarkType, estimate_depth,
)


def test_thirty_landmark_types():
    assert len(LandmarkType) == 30


def test_string_type_is_coerced():
    lm = FacialLandmark("nose", 0.5, 0.5)
    assert lm.type is LandmarkType.NOSE
    assert lm.confidence == 1.0


def test_unknown_type_rejected():
    with pytest.raises(ValueError, match="Unknown landmark type"):
        FacialLandmark("earLobe", 0.5, 0.5)


def test_depth_lookup():
    assert FacialLandmark(LandmarkType.NOSE, 0.5, 0.5).depth == 0.03
    assert estimate_depth(LandmarkType.LEFT_PUPIL) == -0.025
    assert estimate_depth(LandmarkType.EYE_LEFT) < 0 < estimate_depth(LandmarkType.NOSE)


def test_untabled_types_default_to_zero():
    untabled = [t for t in LandmarkType if t not in LANDMARK_DEPTHS]
    assert untabled
    for t in untabled:
        assert estimate_depth(t) == 0.0


@pytest.mark.parametrize("x, y, expected", [
    (0.0, 0.0, True),
    (1.0, 1.0, True),
    (1.5, 0.5, False),
    (0.5, -0.01, False),
    (math.nan, 0.5, False),
    (0.5, math.inf, False),
])
def test_in_unit_range(x, y, expected):
    assert FacialLandmark("nose", x, y).in_unit_range is expected


def test_landmarks_are_immutable():
    lm = FacialLandmark("nose", 0.5, 0.5)
    with pytest.raises(AttributeError):
        lm.x = 0.1
