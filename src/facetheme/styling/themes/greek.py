"""Greek theme: marble-smooth skin, classical proportions, soft temple light.

The proportion pass nudges eye spacing, nose length and mouth height toward
golden-ratio targets on a nominal face height of 2 (the face-centred frame
spans [-1, 1]).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

import numpy as np

from facetheme.constants import GOLDEN_RATIO
from facetheme.lighting.model import (
    AmbientLight,
    AtmosphericData,
    ColorGrading,
    LightSource,
    MistData,
    ParticleData,
    ShadowData,
)
from facetheme.styling.base import ThemeConfig, ThemeStyle
from facetheme.styling.features import RGB, FacialStructure, StyleFeatures
from facetheme.texture.data import HairTextureData, TextureData
from facetheme.texture.layers import flow_map, normal_map, shift_where, solid_layer, specular_map
from facetheme.texture.noise import braid_noise, curl_noise, hash_noise, marble_noise, texel_grid

logger = logging.getLogger(__name__)

NOMINAL_FACE_HEIGHT = 2.0
NOMINAL_NOSE_LENGTH = 0.3


@dataclass(frozen=True)
class GreekConfig(ThemeConfig):
    INTENSITY_FIELDS = (
        "classical_proportions", "marble_smoothing", "noble_expression", "classical_hair_styling",
    )

    classical_proportions: float = 0.8
    marble_smoothing: float = 0.7
    noble_expression: float = 0.6
    classical_hair_styling: float = 0.7
    soft_lighting: bool = True
    golden_ratio_adjustment: bool = True
    marble_texture: bool = True

    def fast(self) -> "GreekConfig":
        # Skip the proportion pass and the layered marble
        return replace(self, golden_ratio_adjustment=False, marble_texture=False)

    def high(self) -> "GreekConfig":
        return replace(
            self,
            classical_proportions=self.classical_proportions * 1.2,
            marble_smoothing=self.marble_smoothing * 1.3,
        )


def golden_ratio_pass(xc, yc, proportions: float):
    """Nudge eye, nose and lip regions toward golden-ratio distances.

    Regions are exclusive and tested in that order.  Returns the number of
    vertices moved per region.
    """
    phi = GOLDEN_RATIO
    ax = np.abs(xc)
    eye = (yc > 0.1) & (yc < 0.3) & (ax > 0.2)
    nose = ~eye & (ax < 0.1) & (yc > -0.1) & (yc < 0.2)
    lip = ~eye & ~nose & (ax < 0.2) & (yc > -0.3) & (yc < -0.1)

    ideal_eye = NOMINAL_FACE_HEIGHT / phi * 0.3
    xc[eye] *= 1.0 + (ideal_eye / ax[eye] - 1.0) * proportions * 0.1

    ideal_nose = NOMINAL_FACE_HEIGHT / (phi * phi)
    yc[nose] *= 1.0 + (ideal_nose / NOMINAL_NOSE_LENGTH - 1.0) * proportions * 0.05

    ideal_lip = NOMINAL_FACE_HEIGHT / (phi * 1.5)
    yc[lip] *= 1.0 + (ideal_lip / np.abs(yc[lip]) - 1.0) * proportions * 0.03

    return int(eye.sum()), int(nose.sum()), int(lip.sum())


class GreekStyle(ThemeStyle):
    theme_id = "greek"
    display_name = "Greek"
    config_class = GreekConfig
    # Cool marble bias
    channel_bias = ((0.95, 0.025), (0.98, 0.01), (0.92, 0.04))

    def style_vector_tail(self, indices, config: GreekConfig):
        return np.sin(indices * GOLDEN_RATIO * 0.1) * config.classical_proportions

    def style_features(self, means, config: GreekConfig) -> StyleFeatures:
        avg_r, avg_g, avg_b = means
        m = config.marble_smoothing
        n = config.noble_expression
        c = config.classical_proportions
        h = config.classical_hair_styling
        return StyleFeatures(
            skin_tone=RGB(
                max(0.85, avg_r * (1.0 + m * 0.15)),
                max(0.82, avg_g * (1.0 + m * 0.12)),
                max(0.78, avg_b * (1.0 + m * 0.08)),
            ),
            hair_color=RGB(0.6 + h * 0.2, 0.45 + h * 0.15, 0.25 + h * 0.1),
            eye_color=RGB(0.3 + n * 0.2, 0.4 + n * 0.15, 0.6 + n * 0.1),
            facial_structure=FacialStructure(
                jaw_strength=0.6 + c * 0.2,
                cheekbone_prominence=0.7 + c * 0.2,
                eye_size=1.0 + n * 0.1,
                nose_shape=1.0 + c * 0.05,
                lip_fullness=0.9 + n * 0.1,
            ),
            # Composure: the nobler, the calmer
            expression_intensity=0.7 - n * 0.3,
        )

    def displace(self, xc, yc, z, features, config: GreekConfig):
        if not config.golden_ratio_adjustment:
            return xc, yc, z
        moved = golden_ratio_pass(xc, yc, config.classical_proportions)
        logger.debug(
            "Golden ratio pass moved %d eye, %d nose, %d lip vertices (proportions %.2f)",
            *moved, config.classical_proportions,
        )
        return xc, yc, z

    def matrix_scales(self, features, config: GreekConfig, intensity):
        c = config.classical_proportions
        return (
            1.0 + c * 0.02 * intensity / GOLDEN_RATIO,
            1.0 + c * 0.03 * intensity,
            1.0 + c * 0.01 * intensity,
        )

    # ── Textures ──

    def skin_texture(self, config: GreekConfig, rng):
        xs, ys = texel_grid(self.texture_size)
        m = config.marble_smoothing
        if config.marble_texture:
            field = marble_noise(xs * 0.02, ys * 0.02) * m + marble_noise(xs * 0.01, ys * 0.01) * m * 0.5
        else:
            field = hash_noise(xs * 0.02, ys * 0.02) * m * 0.1
        smoothness = np.clip(0.9 + field, 0.0, 1.0)
        image = solid_layer(smoothness, (240.0, 230.0, 220.0), (-15.0, -10.0, -8.0))
        image = np.maximum(image, np.array([200.0, 190.0, 180.0]))

        # Soft highlights and faint veining
        soft = marble_noise(xs * 0.005, ys * 0.005) * m
        image = shift_where(image, soft > 0.1, soft[..., np.newaxis] * np.array([20.0, 18.0, 15.0]))
        vein = marble_noise(xs * 0.1, ys * 0.1) * m * 0.2
        image = shift_where(image, vein > 0.3, (vein * 10.0)[..., np.newaxis] * np.array([1.0, 0.9, 0.8]))

        # Brighten the eye band and the lips
        size = self.texture_size
        n = config.noble_expression
        eye_band = (ys > size * 0.3) & (ys < size * 0.6)
        image = shift_where(image, eye_band, np.array([1.0, 0.9, 0.8]) * n * 15.0)
        lips = (ys > size * 0.7) & (ys < size * 0.8) & (xs > size * 0.3) & (xs < size * 0.7)
        image = shift_where(image, lips, np.array([1.0, 0.7, 0.6]) * n * 10.0)
        return TextureData.from_float(image), []

    def hair_texture(self, config: GreekConfig) -> HairTextureData:
        xs, ys = texel_grid(self.hair_size)
        h = config.classical_hair_styling
        curls = solid_layer(curl_noise(xs, ys, center=self.hair_size / 2) * h, (120.0, 80.0, 40.0), (40.0, 30.0, 20.0))
        braids = solid_layer(braid_noise(xs, ys) * h, (100.0, 70.0, 35.0), (35.0, 25.0, 15.0))
        return HairTextureData(
            base=TextureData.from_float(curls),
            secondary=TextureData.from_float(braids),
            flow_map=flow_map(
                np.sin(xs * 0.05 + ys * 0.02) * h * 0.5,
                np.cos(xs * 0.02 + ys * 0.05) * h * 0.5,
            ),
            palette=[RGB(0.7, 0.5, 0.3), RGB(0.6, 0.4, 0.25), RGB(0.5, 0.35, 0.2)],
            style="curls",
        )

    def surface_maps(self, config: GreekConfig):
        xs, ys = texel_grid(self.texture_size)
        normals = normal_map(
            marble_noise(xs * 0.05, ys * 0.05),
            marble_noise(xs * 0.05 + 100.0, ys * 0.05 + 100.0),
            amplitude=0.2,
            z=0.9,
        )
        # Polished marble reflects more than skin
        specular = specular_map(marble_noise(xs * 0.02, ys * 0.02), scale=0.4, offset=0.6)
        return normals, specular

    # ── Lighting ──

    def light_setup(self, analysis, config: GreekConfig):
        primary = LightSource(
            direction=(0.4, -0.3, 0.8),
            color=RGB(1.0, 0.98, 0.95),
            intensity=analysis.intensity * (1.0 if config.soft_lighting else 1.2),
        )
        ambient = AmbientLight(
            color=RGB(0.95, 0.96, 0.98),
            intensity=max(0.5, analysis.ambient_level + 0.2) if config.soft_lighting
            else analysis.ambient_level,
        )
        return primary, ambient

    def shadows(self, config: GreekConfig):
        return [
            ShadowData(position=(0.15, -0.2, 0.0), intensity=0.3, softness=0.8),
            ShadowData(position=(-0.15, -0.2, 0.0), intensity=0.3, softness=0.8),
            ShadowData(position=(0.0, -0.4, 0.0), intensity=0.4, softness=0.7),
            ShadowData(position=(0.05, 0.1, 0.0), intensity=0.2, softness=0.9),
        ]

    def atmosphere(self, config: GreekConfig):
        return AtmosphericData(
            particles=[ParticleData("dust", 0.1, RGB(0.9, 0.9, 0.85), (0.02, 0.01, 0.0))],
            mist=MistData(density=0.05, color=RGB(0.95, 0.96, 0.98), height=0.2),
            color_grading=ColorGrading(
                shadows=RGB(0.9, 0.92, 0.95),
                midtones=RGB(1.0, 0.98, 0.96),
                highlights=RGB(1.05, 1.02, 0.98),
                saturation=0.9,
                contrast=0.8,
            ),
        )
