"""Per-request processing options and mesh generation options."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from facetheme.constants import RESOLUTION_VERTEX_COUNTS


class Quality(str, Enum):
    FAST = "fast"
    BALANCED = "balanced"
    HIGH = "high"


class Resolution(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def vertex_count(self) -> int:
        """Synthetic vertices added on top of the landmark vertices."""
        return RESOLUTION_VERTEX_COUNTS[self.value]


_QUALITY_RESOLUTION = {
    Quality.FAST: Resolution.LOW,
    Quality.BALANCED: Resolution.MEDIUM,
    Quality.HIGH: Resolution.HIGH,
}


def _check_unit(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class ProcessingOptions:
    """Caller-supplied options for one styling request.  Never mutated."""
    quality: Quality = Quality.BALANCED
    style_intensity: float = 0.8
    preserve_identity: float = 0.9
    output_format: str = "jpeg"
    target_width: Optional[int] = None
    target_height: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "quality", Quality(self.quality))
        object.__setattr__(
            self, "style_intensity", _check_unit("style_intensity", self.style_intensity))
        object.__setattr__(
            self, "preserve_identity", _check_unit("preserve_identity", self.preserve_identity))
        if self.output_format not in ("jpeg", "png"):
            raise ValueError(f"Unsupported output format: {self.output_format}")
        for name in ("target_width", "target_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class MeshGenerationOptions:
    """Controls for the mesh builder."""
    resolution: Resolution = Resolution.MEDIUM
    smoothing_iterations: int = 3
    generate_normals: bool = True
    generate_uv_mapping: bool = True

    def __post_init__(self):
        object.__setattr__(self, "resolution", Resolution(self.resolution))
        if self.smoothing_iterations < 0:
            raise ValueError("smoothing_iterations must be >= 0")

    @staticmethod
    def for_quality(quality: Quality | str, **kwargs) -> "MeshGenerationOptions":
        """Mesh options matching a processing quality tier."""
        return MeshGenerationOptions(resolution=_QUALITY_RESOLUTION[Quality(quality)], **kwargs)
