"""Mystic theme: pale ethereal skin, glowing eyes, arcane rune marks, aura light."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

import numpy as np

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
from facetheme.texture.layers import (
    apply_strokes,
    flow_map,
    normal_map,
    random_strokes,
    shift_where,
    solid_layer,
    specular_map,
)
from facetheme.texture.noise import fbm, hash_noise, texel_grid

logger = logging.getLogger(__name__)

RUNE_KINDS = ("sigil", "glyph", "spiral", "line")
MAX_RUNES = 10


@dataclass(frozen=True)
class MysticConfig(ThemeConfig):
    INTENSITY_FIELDS = ("ethereal_glow", "arcane_markings", "aura_strength", "hair_luminance")

    ethereal_glow: float = 0.7
    arcane_markings: float = 0.4
    aura_strength: float = 0.6
    hair_luminance: float = 0.5
    glowing_eyes: bool = True
    rune_markings: bool = True
    aura_lighting: bool = True

    def fast(self) -> "MysticConfig":
        return replace(self, rune_markings=False, aura_lighting=False)

    def high(self) -> "MysticConfig":
        return replace(
            self,
            arcane_markings=self.arcane_markings * 1.4,
            ethereal_glow=self.ethereal_glow * 1.2,
        )


class MysticStyle(ThemeStyle):
    theme_id = "mystic"
    display_name = "Mystic"
    config_class = MysticConfig
    channel_bias = ((0.9, 0.02), (0.95, 0.03), (0.9, 0.1))

    def style_vector_tail(self, indices, config: MysticConfig):
        return (
            np.cos(indices * 0.07) * config.ethereal_glow * 0.5
            + np.sin(indices * 0.13) * config.aura_strength * 0.5
        )

    def style_features(self, means, config: MysticConfig) -> StyleFeatures:
        avg_r, avg_g, avg_b = means
        g = config.ethereal_glow
        a = config.aura_strength
        h = config.hair_luminance
        if config.glowing_eyes:
            eyes = RGB(0.3 + g * 0.2, 0.7 + g * 0.3, 0.9 + g * 0.1)
        else:
            eyes = RGB(0.3, 0.5, 0.7)
        return StyleFeatures(
            # Pale and cool: blend toward a blue-white glow
            skin_tone=RGB(
                avg_r * (1.0 - g * 0.15) + g * 0.1,
                avg_g * (1.0 - g * 0.1) + g * 0.1,
                avg_b * (1.0 - g * 0.05) + g * 0.2,
            ),
            hair_color=RGB(0.55 + h * 0.3, 0.6 + h * 0.3, 0.75 + h * 0.2),
            eye_color=eyes,
            facial_structure=FacialStructure(
                jaw_strength=0.6 + a * 0.1,
                cheekbone_prominence=0.75 + g * 0.2,
                eye_size=1.0 + (g * 0.15 if config.glowing_eyes else 0.0),
                nose_shape=1.0 - g * 0.05,
                lip_fullness=0.85 + g * 0.05,
            ),
            expression_intensity=0.5 + a * 0.3,
        )

    def displace(self, xc, yc, z, features, config):
        s = features.facial_structure
        ax = np.abs(xc)
        eye = (yc > 0.05) & (yc < 0.35) & (ax > 0.15) & (ax < 0.6)
        cheek = ~eye & (yc > -0.1) & (yc < 0.3) & (ax > 0.25)

        # Lift the eyes and raise the cheekbones
        yc[eye] *= 1.0 + (s.eye_size - 1.0) * 0.05
        z[cheek] *= 1.0 + (s.cheekbone_prominence - 1.0) * 0.1
        return xc, yc, z

    def matrix_scales(self, features, config: MysticConfig, intensity):
        return (
            1.0 + config.ethereal_glow * 0.02 * intensity,
            1.0 + config.ethereal_glow * 0.04 * intensity,
            1.0 + config.aura_strength * 0.03 * intensity,
        )

    # ── Textures ──

    def skin_texture(self, config: MysticConfig, rng):
        xs, ys = texel_grid(self.texture_size)
        g = config.ethereal_glow
        mist = fbm(xs * 0.02, ys * 0.02)
        image = solid_layer(mist * g, (215.0, 220.0, 235.0), (-12.0, -8.0, 6.0))

        # Glow veils where the field rises
        image = shift_where(image, mist > 0.2, mist[..., np.newaxis] * np.array([10.0, 15.0, 25.0]) * g)

        runes = []
        if config.rune_markings:
            runes = random_strokes(
                rng,
                count=int(np.floor(config.arcane_markings * MAX_RUNES)),
                width=self.texture_size,
                height=self.texture_size,
                kinds=RUNE_KINDS,
                length_range=(15.0, 50.0),
                width_range=(1.0, 3.0),
                depth_range=(0.4, 1.0),
            )
            image = apply_strokes(image, runes, (0.6, 0.9, 1.4), scale=60.0)
        logger.debug("Mystic skin: %d runes", len(runes))
        return TextureData.from_float(image), runes

    def hair_texture(self, config: MysticConfig) -> HairTextureData:
        xs, ys = texel_grid(self.hair_size)
        h = config.hair_luminance
        sheen = fbm(xs * 0.05, ys * 0.05, octaves=3)
        base = solid_layer(sheen * h, (170.0, 180.0, 205.0), (40.0, 40.0, 35.0))
        glints = solid_layer(np.maximum(hash_noise(xs * 0.3, ys * 0.3), 0.0) * h, (60.0, 70.0, 90.0), (150.0, 150.0, 160.0))
        return HairTextureData(
            base=TextureData.from_float(base),
            secondary=TextureData.from_float(glints),
            flow_map=flow_map(
                np.sin(ys * 0.03) * 0.5 * (0.5 + h),
                np.cos(xs * 0.03) * 0.5 * (0.5 + h),
            ),
            palette=[RGB(0.85, 0.88, 0.95), RGB(0.7, 0.75, 0.9), RGB(0.55, 0.6, 0.8)],
            style="flowing",
        )

    def surface_maps(self, config: MysticConfig):
        xs, ys = texel_grid(self.texture_size)
        normals = normal_map(
            fbm(xs * 0.05, ys * 0.05, octaves=3),
            fbm(xs * 0.05 + 100.0, ys * 0.05 + 100.0, octaves=3),
            amplitude=0.15,
            z=0.95,
        )
        specular = specular_map(fbm(xs * 0.03, ys * 0.03, octaves=3), scale=0.3, offset=0.5)
        return normals, specular

    # ── Lighting ──

    def light_setup(self, analysis, config: MysticConfig):
        primary = LightSource(
            direction=(-0.3, -0.6, 0.7),
            color=RGB(0.7, 0.8, 1.0),
            intensity=analysis.intensity * 0.9,
        )
        glow = config.aura_strength * 0.25 if config.aura_lighting else 0.0
        ambient = AmbientLight(
            color=RGB(0.5, 0.4, 0.8),
            intensity=analysis.ambient_level + 0.15 + glow,
        )
        return primary, ambient

    def shadows(self, config: MysticConfig):
        return [
            ShadowData(position=(0.18, -0.25, 0.0), intensity=0.35, softness=0.6),
            ShadowData(position=(-0.18, -0.25, 0.0), intensity=0.35, softness=0.6),
            ShadowData(position=(0.0, -0.45, 0.0), intensity=0.45, softness=0.5),
        ]

    def atmosphere(self, config: MysticConfig):
        particles = [ParticleData("sparkle", 0.2, RGB(0.8, 0.85, 1.0), (0.0, 0.03, 0.0))]
        if config.aura_lighting:
            particles.append(ParticleData("magic", 0.15, RGB(0.6, 0.4, 1.0), (0.02, 0.05, 0.0)))
        return AtmosphericData(
            particles=particles,
            mist=MistData(density=0.25, color=RGB(0.6, 0.6, 0.9), height=0.4),
            color_grading=ColorGrading(
                shadows=RGB(0.8, 0.8, 1.05),
                midtones=RGB(0.95, 0.97, 1.05),
                highlights=RGB(1.05, 1.05, 1.15),
                saturation=0.85,
                contrast=0.9,
            ),
        )
