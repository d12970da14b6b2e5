"""Anime theme: cel-shaded skin, enlarged eyes, vivid hair, bright flat light."""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from facetheme.lighting.model import (
    AmbientLight,
    AtmosphericData,
    ColorGrading,
    LightSource,
    ParticleData,
    ShadowData,
)
from facetheme.styling.base import ThemeConfig, ThemeStyle
from facetheme.styling.features import RGB, FacialStructure, StyleFeatures
from facetheme.texture.data import HairTextureData, TextureData
from facetheme.texture.layers import flow_map, normal_map, shift_where, solid_layer, specular_map
from facetheme.texture.noise import fbm, quantize, texel_grid

# Eye centres in the face-centred frame
EYE_CENTER_X = 0.4
EYE_CENTER_Y = 0.2


@dataclass(frozen=True)
class AnimeConfig(ThemeConfig):
    INTENSITY_FIELDS = ("cel_shading", "eye_enlargement", "skin_smoothing", "hair_vibrancy")

    cel_shading: float = 0.8
    eye_enlargement: float = 0.6
    skin_smoothing: float = 0.8
    hair_vibrancy: float = 0.7
    big_eyes: bool = True
    bold_outlines: bool = True
    vibrant_palette: bool = True

    def fast(self) -> "AnimeConfig":
        return replace(self, bold_outlines=False)

    def high(self) -> "AnimeConfig":
        return replace(
            self,
            cel_shading=self.cel_shading * 1.2,
            eye_enlargement=self.eye_enlargement * 1.1,
        )

    @property
    def shade_levels(self) -> int:
        """Number of flat tone bands; more cel shading means fewer bands."""
        return max(2, 6 - int(round(self.cel_shading * 3)))


def cel_outline_mask(bands):
    """True on texels whose band differs from the right or lower neighbour."""
    edges = np.zeros(bands.shape, dtype=bool)
    edges[:, :-1] |= bands[:, :-1] != bands[:, 1:]
    edges[:-1, :] |= bands[:-1, :] != bands[1:, :]
    return edges


class AnimeStyle(ThemeStyle):
    theme_id = "anime"
    display_name = "Anime"
    config_class = AnimeConfig
    channel_bias = ((0.95, 0.05), (0.95, 0.04), (0.9, 0.05))

    def style_vector_tail(self, indices, config: AnimeConfig):
        # Stepped wave: cel shading in the encoding too
        return np.round(np.sin(indices * 0.25) * 4.0) / 4.0 * config.cel_shading

    def style_features(self, means, config: AnimeConfig) -> StyleFeatures:
        avg_r, avg_g, avg_b = means
        s = config.skin_smoothing
        c = config.cel_shading
        e = config.eye_enlargement
        v = config.hair_vibrancy
        if config.vibrant_palette:
            hair = RGB(0.25 + v * 0.5, 0.2 + v * 0.25, 0.45 + v * 0.45)
        else:
            hair = RGB(0.25, 0.2, 0.2)
        return StyleFeatures(
            skin_tone=RGB(
                avg_r * (1.0 + s * 0.1) + s * 0.05,
                avg_g * (1.0 + s * 0.08) + s * 0.04,
                avg_b * (1.0 + s * 0.05) + s * 0.04,
            ),
            hair_color=hair,
            eye_color=RGB(0.2 + e * 0.2, 0.4 + e * 0.3, 0.8 + e * 0.2),
            facial_structure=FacialStructure(
                jaw_strength=0.5 + c * 0.1,
                cheekbone_prominence=0.5 + c * 0.1,
                eye_size=1.0 + e * (0.3 if config.big_eyes else 0.1),
                nose_shape=1.0 - c * 0.2,
                lip_fullness=0.8,
            ),
            expression_intensity=0.6 + c * 0.3,
        )

    def displace(self, xc, yc, z, features, config):
        s = features.facial_structure
        ax = np.abs(xc)
        eye = (yc > 0.05) & (yc < 0.35) & (ax > 0.15) & (ax < 0.65)
        nose = ~eye & (ax < 0.15) & (yc > -0.1) & (yc < 0.15)
        chin = ~eye & ~nose & (yc < -0.3)

        # Grow each eye about its own centre
        grow = 1.0 + (s.eye_size - 1.0) * 0.2
        cx = np.sign(xc[eye]) * EYE_CENTER_X
        xc[eye] = cx + (xc[eye] - cx) * grow
        yc[eye] = EYE_CENTER_Y + (yc[eye] - EYE_CENTER_Y) * grow

        # Flatter nose, narrower chin
        z[nose] *= 1.0 + (s.nose_shape - 1.0) * 0.3
        xc[chin] *= 1.0 + (s.jaw_strength - 1.0) * 0.1
        return xc, yc, z

    def matrix_scales(self, features, config: AnimeConfig, intensity):
        return (
            1.0 + config.eye_enlargement * 0.03 * intensity,
            1.0 + config.cel_shading * 0.02 * intensity,
            1.0 + config.skin_smoothing * 0.01 * intensity,
        )

    # ── Textures ──

    def skin_texture(self, config: AnimeConfig, rng):
        xs, ys = texel_grid(self.texture_size)
        # Smoother skin means a lower-frequency, weaker field
        soft = fbm(xs * 0.01, ys * 0.01, octaves=3) * (1.0 - config.skin_smoothing * 0.5)
        tone = np.clip(0.6 + soft * 0.4, 0.0, 1.0)
        bands = quantize(tone, config.shade_levels)
        image = solid_layer(bands, (215.0, 185.0, 170.0), (40.0, 40.0, 40.0))

        if config.bold_outlines:
            edges = cel_outline_mask(bands)
            image = shift_where(image, edges, np.array([-60.0, -60.0, -50.0]) * config.cel_shading)
        return TextureData.from_float(image), []

    def hair_texture(self, config: AnimeConfig) -> HairTextureData:
        xs, ys = texel_grid(self.hair_size)
        v = config.hair_vibrancy
        strands = quantize((np.sin(xs * 0.15) + 1.0) / 2.0, 3)
        base_rgb = (70.0, 50.0, 120.0) if config.vibrant_palette else (60.0, 45.0, 40.0)
        base = solid_layer(strands * v, base_rgb, (120.0, 60.0, 110.0))
        # Single glossy highlight band across the crown
        band = np.abs(ys - self.hair_size * 0.3) < self.hair_size * 0.04
        highlight = np.where(band, 255.0, 0.0)
        return HairTextureData(
            base=TextureData.from_float(base),
            secondary=TextureData.from_float(np.repeat(highlight[..., np.newaxis], 3, axis=2), alpha=highlight),
            flow_map=flow_map(np.zeros(xs.shape), np.full(xs.shape, 0.8)),
            palette=[RGB(0.6, 0.4, 0.9), RGB(0.4, 0.3, 0.8), RGB(0.9, 0.6, 0.9)],
            style="spiky",
        )

    def surface_maps(self, config: AnimeConfig):
        xs, ys = texel_grid(self.texture_size)
        flat = np.zeros(xs.shape)
        normals = normal_map(flat, flat, amplitude=0.0, z=1.0)
        spots = quantize((fbm(xs * 0.02, ys * 0.02, octaves=2) + 1.0) / 2.0, 2)
        specular = specular_map(spots, scale=0.6, offset=0.2)
        return normals, specular

    # ── Lighting ──

    def light_setup(self, analysis, config: AnimeConfig):
        primary = LightSource(
            direction=(0.3, -0.5, 0.8),
            color=RGB(1.0, 0.98, 0.96),
            intensity=analysis.intensity * 1.1,
        )
        ambient = AmbientLight(color=RGB(1.0, 0.95, 0.95), intensity=analysis.ambient_level + 0.3)
        return primary, ambient

    def shadows(self, config: AnimeConfig):
        # Cel shadows have hard edges
        return [
            ShadowData(position=(0.2, -0.25, 0.0), intensity=0.5, softness=0.05),
            ShadowData(position=(-0.2, -0.25, 0.0), intensity=0.5, softness=0.05),
            ShadowData(position=(0.0, -0.45, 0.0), intensity=0.6, softness=0.05),
        ]

    def atmosphere(self, config: AnimeConfig):
        return AtmosphericData(
            particles=[
                ParticleData("sparkle", 0.15, RGB(1.0, 1.0, 0.9), (0.0, 0.02, 0.0)),
                ParticleData("petal", 0.05, RGB(1.0, 0.75, 0.8), (0.05, -0.03, 0.0)),
            ],
            mist=None,
            color_grading=ColorGrading(
                shadows=RGB(0.9, 0.85, 1.0),
                midtones=RGB(1.0, 1.0, 1.0),
                highlights=RGB(1.05, 1.05, 1.05),
                saturation=1.3,
                contrast=1.1,
            ),
        )
