"""Barbarian theme: rugged, weathered skin, scars, wild hair, harsh light."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

import numpy as np

from facetheme.core.math_utils import luminance
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
from facetheme.texture.data import FacialHairData, HairTextureData, TextureData
from facetheme.texture.layers import (
    apply_strokes,
    flow_map,
    normal_map,
    random_strokes,
    shift_where,
    solid_layer,
    specular_map,
)
from facetheme.texture.noise import hash_noise, texel_grid

logger = logging.getLogger(__name__)

SCAR_KINDS = ("cut", "burn", "claw", "battle")
MAX_SCARS = 8


@dataclass(frozen=True)
class BarbarianConfig(ThemeConfig):
    INTENSITY_FIELDS = ("ruggedness_factor", "weathering_intensity", "scar_density", "hair_wildness")

    ruggedness_factor: float = 0.7
    weathering_intensity: float = 0.6
    scar_density: float = 0.3
    hair_wildness: float = 0.8
    beard_enhancement: bool = True
    dramatic_lighting: bool = True
    battle_hardened: bool = True

    def fast(self) -> "BarbarianConfig":
        # Fewer scars, no beard layer
        return replace(self, scar_density=self.scar_density * 0.5, beard_enhancement=False)

    def high(self) -> "BarbarianConfig":
        return replace(
            self,
            scar_density=self.scar_density * 1.5,
            weathering_intensity=self.weathering_intensity * 1.2,
        )


class BarbarianStyle(ThemeStyle):
    theme_id = "barbarian"
    display_name = "Barbarian"
    config_class = BarbarianConfig
    # Warm, sun-baked bias on the rendered input
    channel_bias = ((1.0, 0.05), (0.95, 0.02), (0.9, 0.0))

    def style_vector_tail(self, indices, config: BarbarianConfig):
        return np.sin(indices * 0.1) * config.ruggedness_factor

    def style_features(self, means, config: BarbarianConfig) -> StyleFeatures:
        w = config.weathering_intensity
        r = config.ruggedness_factor
        hardened = config.battle_hardened

        # Weathering darkens every channel, then pulls the warm channels
        # toward grey
        darkened = [c * (1.0 - 0.2 * w) for c in means]
        grey = luminance(darkened)
        skin = [c - (c - grey) * 0.25 * w if c > grey else c for c in darkened]

        h = config.hair_wildness
        return StyleFeatures(
            skin_tone=RGB(*skin),
            hair_color=RGB(0.3 + h * 0.2, 0.2 + h * 0.1, 0.1 + h * 0.05),
            eye_color=RGB(
                0.4 + (0.1 if hardened else 0.0),
                0.3 + (0.1 if hardened else 0.0),
                0.2 + (0.2 if hardened else 0.0),
            ),
            facial_structure=FacialStructure(
                jaw_strength=0.7 + r * 0.3,
                cheekbone_prominence=0.6 + r * 0.2,
                eye_size=1.0 - (0.1 if hardened else 0.0),
                nose_shape=1.0 + r * 0.1,
                lip_fullness=0.8 - r * 0.1,
            ),
            expression_intensity=0.8 + (0.2 if hardened else 0.0),
        )

    def displace(self, xc, yc, z, features, config):
        s = features.facial_structure
        jaw = (yc < -0.2) & (np.abs(xc) > 0.3)
        cheek = ~jaw & (yc > -0.1) & (yc < 0.2) & (np.abs(xc) > 0.2)

        xc[jaw] *= 1.0 + (s.jaw_strength - 1.0) * 0.1
        z[jaw] *= 1.0 + (s.jaw_strength - 1.0) * 0.05
        z[cheek] *= 1.0 + (s.cheekbone_prominence - 1.0) * 0.1
        logger.debug(
            "Barbarian deformation: %d jaw, %d cheek vertices (jaw %.2f, cheek %.2f)",
            int(jaw.sum()), int(cheek.sum()), s.jaw_strength, s.cheekbone_prominence,
        )
        return xc, yc, z

    def matrix_scales(self, features, config: BarbarianConfig, intensity):
        r = config.ruggedness_factor
        return 1.0 + r * 0.05 * intensity, 1.0 + r * 0.03 * intensity, 1.0 + r * 0.02 * intensity

    # ── Textures ──

    def skin_texture(self, config: BarbarianConfig, rng):
        xs, ys = texel_grid(self.texture_size)
        r = config.ruggedness_factor
        roughness = np.clip(
            0.6 + hash_noise(xs * 0.1, ys * 0.1) * r + hash_noise(xs * 0.05, ys * 0.05) * r * 0.5,
            0.0, 1.0,
        )
        image = solid_layer(roughness, (180.0, 140.0, 100.0), (40.0, 30.0, 20.0))

        # Weathered patches and age spots
        w = config.weathering_intensity
        weather = hash_noise(xs * 0.02, ys * 0.02) * w
        spots = hash_noise(xs * 0.3, ys * 0.3) * w * 0.3
        patch = weather > 0.3
        image = shift_where(image, patch, -weather[..., np.newaxis] * np.array([30.0, 25.0, 20.0]))
        image = shift_where(image, spots > 0.4, (-20.0, -15.0, -10.0))

        scars = random_strokes(
            rng,
            count=int(np.floor(config.scar_density * MAX_SCARS)),
            width=self.texture_size,
            height=self.texture_size,
            kinds=SCAR_KINDS,
            length_range=(20.0, 80.0),
            width_range=(2.0, 6.0),
        )
        image = apply_strokes(image, scars, (1.0, 0.8, 0.6), scale=-100.0)
        logger.debug("Barbarian skin: %d weathered texels, %d scars", int(patch.sum()), len(scars))
        return TextureData.from_float(image), scars

    def hair_texture(self, config: BarbarianConfig) -> HairTextureData:
        xs, ys = texel_grid(self.hair_size)
        h = config.hair_wildness
        wild = hash_noise(xs * 0.1, ys * 0.1) * h
        base = solid_layer(wild, (40.0, 25.0, 15.0), (20.0, 15.0, 10.0))
        roughness = np.full(xs.shape + (3,), 200.0 + h * 55.0)
        return HairTextureData(
            base=TextureData.from_float(base),
            secondary=TextureData.from_float(roughness),
            flow_map=flow_map(
                np.sin(xs * 0.1 + ys * 0.05) * h,
                np.cos(xs * 0.05 + ys * 0.1) * h,
            ),
            palette=[RGB(0.2, 0.1, 0.05), RGB(0.15, 0.08, 0.03), RGB(0.1, 0.05, 0.02)],
            style="wild",
        )

    def facial_hair_texture(self, config: BarbarianConfig):
        if not config.beard_enhancement:
            return None
        size = self.hair_size
        xs, ys = texel_grid(size)

        beard_density = hash_noise(xs * 0.2, ys * 0.2) * 0.8 + 0.2
        beard_area = ys > size * 0.6
        beard = solid_layer(30.0 + beard_density * 20.0, (0.0, 0.0, 0.0), (1.0, 0.7, 0.5))
        beard_alpha = np.where(beard_area, np.floor(beard_density * 255.0), 0.0)
        beard = np.where(beard_area[..., np.newaxis], beard, 0.0)

        must_density = hash_noise(xs * 0.3, ys * 0.3) * 0.9 + 0.1
        must_area = (ys > size * 0.45) & (ys < size * 0.55) & (xs > size * 0.3) & (xs < size * 0.7)
        mustache = solid_layer(35.0 + must_density * 25.0, (0.0, 0.0, 0.0), (1.0, 0.7, 0.5))
        must_alpha = np.where(must_area, np.floor(must_density * 255.0), 0.0)
        mustache = np.where(must_area[..., np.newaxis], mustache, 0.0)

        return FacialHairData(
            beard=TextureData.from_float(beard, alpha=beard_alpha),
            mustache=TextureData.from_float(mustache, alpha=must_alpha),
            density=0.8,
            roughness=0.9,
            color=RGB(0.2, 0.12, 0.06),
        )

    def surface_maps(self, config: BarbarianConfig):
        xs, ys = texel_grid(self.texture_size)
        normals = normal_map(
            hash_noise(xs * 0.1, ys * 0.1),
            hash_noise(xs * 0.1 + 100.0, ys * 0.1 + 100.0),
            amplitude=0.5,
            z=0.8,
        )
        # Low specularity for rough skin
        specular = specular_map(hash_noise(xs * 0.05, ys * 0.05), scale=0.3, offset=0.1)
        return normals, specular

    # ── Lighting ──

    def light_setup(self, analysis, config: BarbarianConfig):
        boost = 1.5 if config.dramatic_lighting else 1.1
        primary = LightSource(
            direction=(0.7, -0.5, 0.5),   # low, harsh side light
            color=RGB(1.0, 0.8, 0.6),     # firelight
            intensity=analysis.intensity * boost,
        )
        ambient = AmbientLight(
            color=RGB(0.3, 0.4, 0.5),
            intensity=analysis.ambient_level * (0.67 if config.dramatic_lighting else 1.0),
        )
        return primary, ambient

    def shadows(self, config: BarbarianConfig):
        return [
            ShadowData(position=(0.2, -0.3, 0.0), intensity=0.7, softness=0.2),
            ShadowData(position=(-0.2, -0.3, 0.0), intensity=0.7, softness=0.2),
            ShadowData(position=(0.0, -0.5, 0.0), intensity=0.8, softness=0.1),
        ]

    def atmosphere(self, config: BarbarianConfig):
        return AtmosphericData(
            particles=[
                ParticleData("dust", 0.3, RGB(0.6, 0.5, 0.4), (0.1, 0.05, 0.0)),
                ParticleData("smoke", 0.1, RGB(0.2, 0.2, 0.2), (0.05, 0.2, 0.0)),
            ],
            mist=MistData(density=0.1, color=RGB(0.4, 0.4, 0.5), height=0.3),
            color_grading=ColorGrading(
                shadows=RGB(0.8, 0.7, 0.6),
                midtones=RGB(1.0, 0.9, 0.8),
                highlights=RGB(1.1, 1.0, 0.9),
                saturation=1.1,
                contrast=1.3,
            ),
        )
