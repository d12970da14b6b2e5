"""Texture buffers and the records a theme's texture recipe returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from facetheme.core.mesh import FaceMesh
from facetheme.styling.features import RGB


@dataclass(eq=False)
class TextureData:
    """An RGBA image held as a ``(height, width, 4)`` uint8 array."""
    data: NDArray[np.uint8]

    def __post_init__(self):
        data = np.asarray(self.data)
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"TextureData expects (H, W, 4), got {data.shape}")
        self.data = np.ascontiguousarray(data, dtype=np.uint8)

    @classmethod
    def blank(cls, width: int, height: int) -> "TextureData":
        """Fully transparent texture."""
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def from_float(cls, rgb: NDArray, alpha=255.0) -> "TextureData":
        """Build from float channel values on the 0-255 scale.

        Values are clamped to [0, 255] and truncated.  *alpha* may be a
        scalar or an ``(H, W)`` array.
        """
        rgb = np.asarray(rgb, dtype=np.float64)
        h, w = rgb.shape[:2]
        out = np.empty((h, w, 4), dtype=np.float64)
        out[..., :3] = rgb
        out[..., 3] = alpha
        return cls(np.clip(out, 0.0, 255.0).astype(np.uint8))

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def channels(self) -> int:
        return 4

    def tobytes(self) -> bytes:
        """Row-major RGBA bytes, ``width * height * 4`` long."""
        return self.data.tobytes()

    def to_image(self):
        """Return a Pillow RGBA image sharing nothing with this buffer."""
        from PIL import Image
        return Image.fromarray(self.data.copy())


@dataclass(eq=False)
class HairTextureData:
    """Hair material: base colour, a secondary map and a flow-direction map.

    ``secondary`` is a roughness map for rugged themes, or an alternate
    pattern (braids, highlights) for the others.
    """
    base: TextureData
    secondary: TextureData
    flow_map: TextureData
    palette: list[RGB] = field(default_factory=list)
    style: str = "straight"


@dataclass(eq=False)
class FacialHairData:
    beard: TextureData
    mustache: TextureData
    density: float
    roughness: float
    color: RGB


@dataclass(frozen=True)
class StrokeData:
    """One linear mark (scar, rune) drawn into a skin texture.

    Positions and lengths are in texels; ``angle`` is in radians.
    """
    kind: str
    x: float
    y: float
    length: float
    width: float
    depth: float
    age: float
    angle: float


@dataclass(eq=False)
class TexturedResult:
    theme_id: str
    textured_mesh: FaceMesh
    base_texture: TextureData
    normal_texture: TextureData
    specular_texture: TextureData
    hair: HairTextureData
    facial_hair: Optional[FacialHairData] = None
    strokes: list[StrokeData] = field(default_factory=list)
