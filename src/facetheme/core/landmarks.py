"""Facial landmark types and the anatomical depth table.

Landmarks arrive from an external detector as named, normalised 2D points.
Depth is not observed; it is looked up per landmark type from a fixed table
of typical facial relief (eyes recessed, nose protruding).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class LandmarkType(str, Enum):
    EYE_LEFT = "eyeLeft"
    EYE_RIGHT = "eyeRight"
    NOSE = "nose"
    MOUTH_LEFT = "mouthLeft"
    MOUTH_RIGHT = "mouthRight"
    CHIN_BOTTOM = "chinBottom"
    LEFT_EYEBROW_LEFT = "leftEyeBrowLeft"
    LEFT_EYEBROW_RIGHT = "leftEyeBrowRight"
    LEFT_EYEBROW_UP = "leftEyeBrowUp"
    RIGHT_EYEBROW_LEFT = "rightEyeBrowLeft"
    RIGHT_EYEBROW_RIGHT = "rightEyeBrowRight"
    RIGHT_EYEBROW_UP = "rightEyeBrowUp"
    LEFT_EYE_LEFT = "leftEyeLeft"
    LEFT_EYE_RIGHT = "leftEyeRight"
    LEFT_EYE_UP = "leftEyeUp"
    LEFT_EYE_DOWN = "leftEyeDown"
    RIGHT_EYE_LEFT = "rightEyeLeft"
    RIGHT_EYE_RIGHT = "rightEyeRight"
    RIGHT_EYE_UP = "rightEyeUp"
    RIGHT_EYE_DOWN = "rightEyeDown"
    NOSE_LEFT = "noseLeft"
    NOSE_RIGHT = "noseRight"
    MOUTH_UP = "mouthUp"
    MOUTH_DOWN = "mouthDown"
    LEFT_PUPIL = "leftPupil"
    RIGHT_PUPIL = "rightPupil"
    UPPER_JAWLINE_LEFT = "upperJawlineLeft"
    MID_JAWLINE_LEFT = "midJawlineLeft"
    MID_JAWLINE_RIGHT = "midJawlineRight"
    UPPER_JAWLINE_RIGHT = "upperJawlineRight"


# Relative depth (z) per landmark type; positive = toward the viewer.
LANDMARK_DEPTHS: dict[LandmarkType, float] = {
    # Eyes sit in the orbits
    LandmarkType.EYE_LEFT: -0.02,
    LandmarkType.EYE_RIGHT: -0.02,
    LandmarkType.LEFT_PUPIL: -0.025,
    LandmarkType.RIGHT_PUPIL: -0.025,
    # Nose protrudes
    LandmarkType.NOSE: 0.03,
    LandmarkType.NOSE_LEFT: 0.02,
    LandmarkType.NOSE_RIGHT: 0.02,
    # Mouth slightly recessed
    LandmarkType.MOUTH_LEFT: -0.01,
    LandmarkType.MOUTH_RIGHT: -0.01,
    LandmarkType.MOUTH_UP: -0.005,
    LandmarkType.MOUTH_DOWN: -0.01,
    # Chin and jawline
    LandmarkType.CHIN_BOTTOM: 0.01,
    LandmarkType.UPPER_JAWLINE_LEFT: 0.005,
    LandmarkType.UPPER_JAWLINE_RIGHT: 0.005,
    LandmarkType.MID_JAWLINE_LEFT: 0.01,
    LandmarkType.MID_JAWLINE_RIGHT: 0.01,
    # Brow ridge
    LandmarkType.LEFT_EYEBROW_LEFT: 0.005,
    LandmarkType.LEFT_EYEBROW_RIGHT: 0.005,
    LandmarkType.LEFT_EYEBROW_UP: 0.005,
    LandmarkType.RIGHT_EYEBROW_LEFT: 0.005,
    LandmarkType.RIGHT_EYEBROW_RIGHT: 0.005,
    LandmarkType.RIGHT_EYEBROW_UP: 0.005,
}


def estimate_depth(landmark_type: LandmarkType) -> float:
    """Return the anatomical depth for *landmark_type* (0.0 if untabled)."""
    return LANDMARK_DEPTHS.get(landmark_type, 0.0)


@dataclass(frozen=True)
class FacialLandmark:
    """A named, normalised 2D keypoint from the face detector.

    ``type`` may be given as the detector's string name; it is coerced to
    :class:`LandmarkType`.  Coordinates are not range-checked here; the mesh
    builder rejects out-of-range input with a typed error.
    """
    type: LandmarkType
    x: float
    y: float
    confidence: float = 1.0

    def __post_init__(self):
        if not isinstance(self.type, LandmarkType):
            try:
                object.__setattr__(self, "type", LandmarkType(self.type))
            except ValueError:
                raise ValueError(f"Unknown landmark type: {self.type!r}") from None
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @property
    def in_unit_range(self) -> bool:
        """True if both coordinates are finite and inside [0, 1]."""
        return (
            math.isfinite(self.x) and math.isfinite(self.y)
            and 0.0 <= self.x <= 1.0 and 0.0 <= self.y <= 1.0
        )

    @property
    def depth(self) -> float:
        return estimate_depth(self.type)
