"""Style feature records produced by a theme and consumed downstream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from facetheme.core.mesh import FaceMesh

if TYPE_CHECKING:
    from facetheme.core.options import ProcessingOptions


@dataclass(frozen=True)
class RGB:
    """Float colour.  Producers may exceed [0, 1]."""
    r: float
    g: float
    b: float

    def __iter__(self):
        return iter((self.r, self.g, self.b))


@dataclass(frozen=True)
class FacialStructure:
    jaw_strength: float = 1.0
    cheekbone_prominence: float = 1.0
    eye_size: float = 1.0
    nose_shape: float = 1.0
    lip_fullness: float = 1.0


@dataclass(frozen=True)
class StyleFeatures:
    skin_tone: RGB
    hair_color: RGB
    eye_color: RGB
    facial_structure: FacialStructure
    expression_intensity: float


@dataclass(eq=False)
class StyledResult:
    """Output of :meth:`ThemeStyle.apply_style`.

    ``transform_matrix`` is descriptive metadata for the compositor; it is
    not applied to ``styled_mesh``.
    """
    theme_id: str
    styled_mesh: FaceMesh
    style_features: StyleFeatures
    transform_matrix: NDArray[np.float64]
    options: "ProcessingOptions"
