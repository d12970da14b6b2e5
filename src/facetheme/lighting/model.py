"""Lighting and atmosphere records.

Pure data handed to the downstream compositor; nothing here renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from facetheme.constants import (
    DEFAULT_AMBIENT_LEVEL,
    DEFAULT_LIGHT_COLOR,
    DEFAULT_LIGHT_DIRECTION,
    DEFAULT_LIGHT_INTENSITY,
)
from facetheme.core.mesh import FaceMesh
from facetheme.styling.features import RGB

Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class LightingAnalysis:
    """Coarse lighting estimate of the source photo."""
    direction: Vector3 = DEFAULT_LIGHT_DIRECTION
    intensity: float = DEFAULT_LIGHT_INTENSITY
    color: Vector3 = DEFAULT_LIGHT_COLOR
    ambient_level: float = DEFAULT_AMBIENT_LEVEL


@dataclass(frozen=True)
class LightSource:
    direction: Vector3
    color: RGB
    intensity: float
    type: str = "directional"


@dataclass(frozen=True)
class AmbientLight:
    color: RGB
    intensity: float


@dataclass(frozen=True)
class ShadowData:
    """A localised shadow in face-centred coordinates."""
    position: Vector3
    intensity: float
    softness: float


@dataclass
class LightingData:
    primary_light: LightSource
    ambient_light: AmbientLight
    shadows: list[ShadowData] = field(default_factory=list)


@dataclass(frozen=True)
class ParticleData:
    type: str
    density: float
    color: RGB
    motion: Vector3


@dataclass(frozen=True)
class MistData:
    density: float
    color: RGB
    height: float


@dataclass(frozen=True)
class ColorGrading:
    """Per-tonal-range RGB multipliers plus global saturation/contrast."""
    shadows: RGB
    midtones: RGB
    highlights: RGB
    saturation: float = 1.0
    contrast: float = 1.0


@dataclass
class AtmosphericData:
    particles: list[ParticleData]
    color_grading: ColorGrading
    mist: Optional[MistData] = None


@dataclass(eq=False)
class LitResult:
    theme_id: str
    final_mesh: FaceMesh
    lighting: LightingData
    atmosphere: AtmosphericData
