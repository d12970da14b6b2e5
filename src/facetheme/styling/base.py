"""Theme style capability interface.

A :class:`ThemeStyle` owns one theme's immutable default configuration and
implements every per-theme step of the pipeline: style-vector encoding,
feature extraction from the inference result, region-gated mesh
deformation, the descriptive transform matrix, the texture recipe and the
lighting recipe.  The shared plumbing lives here; subclasses fill in the
theme-specific hooks.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Mapping, Optional

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import (
    BASE_TEXTURE_SIZE,
    HAIR_TEXTURE_SIZE,
    STYLE_VECTOR_HEAD,
    STYLE_VECTOR_LENGTH,
    TENSOR_SIZE,
)
from facetheme.core.config_loader import load_theme_config
from facetheme.core.errors import ThemeStyleError
from facetheme.core.math_utils import mat4_scale
from facetheme.core.mesh import FaceMesh, face_frame, from_face_frame
from facetheme.core.options import ProcessingOptions, Quality
from facetheme.lighting.model import (
    AmbientLight,
    AtmosphericData,
    LightingAnalysis,
    LightingData,
    LightSource,
    LitResult,
    ShadowData,
)
from facetheme.mesh.smoothing import compute_vertex_normals
from facetheme.styling.features import StyledResult, StyleFeatures
from facetheme.styling.inference import (
    InferenceEngine,
    InferenceRequest,
    channel_means,
    styled_image_from,
)
from facetheme.texture.data import (
    FacialHairData,
    HairTextureData,
    StrokeData,
    TexturedResult,
    TextureData,
)

logger = logging.getLogger(__name__)


# ── Configuration ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ThemeConfig:
    """Base for per-theme knob records.

    Subclasses declare float and bool fields (all with defaults) and list
    the float knobs that scale with ``style_intensity`` in
    ``INTENSITY_FIELDS``.  Instances are never mutated; every derivation
    returns a new config.
    """
    INTENSITY_FIELDS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThemeConfig":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")
        values = {}
        for name, value in data.items():
            if isinstance(known[name].default, bool):
                values[name] = bool(value)
            else:
                values[name] = float(value)
        return cls(**values)

    def knob_values(self) -> list[float]:
        """Field values in declaration order, booleans as 1.0/0.0."""
        return [float(getattr(self, f.name)) for f in fields(self)]

    def for_request(self, options: ProcessingOptions) -> "ThemeConfig":
        """Config for one request: intensity-scaled, then quality-adjusted."""
        scaled = replace(self, **{
            name: getattr(self, name) * options.style_intensity
            for name in self.INTENSITY_FIELDS
        })
        if options.quality is Quality.FAST:
            return scaled.fast()
        if options.quality is Quality.HIGH:
            return scaled.high()
        return scaled

    def fast(self) -> "ThemeConfig":
        """Adjustments for the fast quality tier."""
        return self

    def high(self) -> "ThemeConfig":
        """Adjustments for the high quality tier."""
        return self


# ── Theme interface ──────────────────────────────────────────────────

class ThemeStyle(ABC):
    """One visual theme.

    Subclasses set ``theme_id`` and ``config_class`` and implement the
    abstract hooks.  ``channel_bias`` holds a ``(scale, offset)`` pair per
    RGB channel applied when rendering the mesh for inference.
    """
    theme_id: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    config_class: ClassVar[type[ThemeConfig]] = ThemeConfig
    channel_bias: ClassVar[tuple[tuple[float, float], ...]] = ((1.0, 0.0), (1.0, 0.0), (1.0, 0.0))
    texture_size: ClassVar[int] = BASE_TEXTURE_SIZE
    hair_size: ClassVar[int] = HAIR_TEXTURE_SIZE

    def __init__(self, default_config: Optional[ThemeConfig] = None):
        if default_config is None:
            default_config = self.config_class.from_dict(load_theme_config(self.theme_id))
        self.default_config = default_config

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.default_config!r})"

    def request_config(self, options: ProcessingOptions) -> ThemeConfig:
        return self.default_config.for_request(options)

    # ── Inference input ──

    def encode_style_vector(self, options: ProcessingOptions) -> NDArray[np.float32]:
        """Fixed-length style vector handed to the inference engine.

        Slots 0-6 hold the request config knobs, 7 and 8 the style
        intensity and identity preservation; the rest is the theme tail.
        """
        config = self.request_config(options)
        vector = np.zeros(STYLE_VECTOR_LENGTH, dtype=np.float32)
        knobs = config.knob_values()[:STYLE_VECTOR_HEAD - 2]
        vector[:len(knobs)] = knobs
        vector[STYLE_VECTOR_HEAD - 2] = options.style_intensity
        vector[STYLE_VECTOR_HEAD - 1] = options.preserve_identity
        indices = np.arange(STYLE_VECTOR_HEAD, STYLE_VECTOR_LENGTH, dtype=np.float64)
        vector[STYLE_VECTOR_HEAD:] = self.style_vector_tail(indices, config)
        return vector

    def render_mesh_to_tensor(self, mesh: FaceMesh, size: int = TENSOR_SIZE) -> NDArray[np.float32]:
        """Splat vertex positions into an NCHW ``(1, 3, size, size)`` tensor.

        Vertex ``(x, y)`` picks the pixel; its ``(x, y, z)`` mapped by
        ``(c + 1) / 2`` and the theme channel bias gives the RGB value.
        Vertices landing outside the image are skipped.
        """
        tensor = np.zeros((1, 3, size, size), dtype=np.float32)
        v = mesh.vertices
        if len(v) == 0:
            return tensor
        finite = np.all(np.isfinite(v), axis=1)
        px = np.floor(np.where(finite, v[:, 0], -1.0) * (size - 1))
        py = np.floor(np.where(finite, v[:, 1], -1.0) * (size - 1))
        inside = finite & (px >= 0) & (px < size) & (py >= 0) & (py < size)
        ix = px[inside].astype(np.int64)
        iy = py[inside].astype(np.int64)
        values = np.clip((v[inside] + 1.0) / 2.0, 0.0, 1.0)
        for c, (scale, offset) in enumerate(self.channel_bias):
            tensor[0, c, iy, ix] = np.clip(values[:, c] * scale + offset, 0.0, 1.0)
        logger.debug("Rendered %d of %d vertices to %dx%d tensor", len(ix), len(v), size, size)
        return tensor

    def prepare_inference_request(self, mesh: FaceMesh, options: ProcessingOptions) -> InferenceRequest:
        return InferenceRequest(
            image_tensor=self.render_mesh_to_tensor(mesh),
            style_vector=self.encode_style_vector(options),
        )

    # ── Style transfer ──

    def extract_style_features(
        self, inference_result: Mapping[str, NDArray], options: ProcessingOptions,
    ) -> StyleFeatures:
        """Channel means of the styled image, biased by the request config."""
        image = styled_image_from(inference_result)
        return self.style_features(channel_means(image), self.request_config(options))

    def deform_mesh(self, mesh: FaceMesh, features: StyleFeatures, options: ProcessingOptions) -> FaceMesh:
        """Region-gated displacement in the face-centred frame; returns a new mesh.

        Normals are recomputed for the displaced geometry when the input
        mesh carries them.
        """
        if mesh.vertex_count == 0:
            return mesh.clone()
        config = self.request_config(options)
        xc, yc = face_frame(mesh)
        z = mesh.vertices[:, 2].copy()
        xc, yc, z = self.displace(xc.copy(), yc.copy(), z, features, config)
        x, y = from_face_frame(mesh, xc, yc)
        styled = mesh.with_vertices(np.column_stack([x, y, z]))
        if mesh.has_normals:
            styled.normal_map = compute_vertex_normals(styled.vertices, styled.triangles)
        return styled

    def transform_matrix(self, features: StyleFeatures, options: ProcessingOptions) -> NDArray[np.float64]:
        """Near-identity 4x4 scale describing the theme's overall stretch."""
        sx, sy, sz = self.matrix_scales(features, self.request_config(options), options.style_intensity)
        return mat4_scale(sx, sy, sz)

    def apply_style(
        self, mesh: FaceMesh, options: ProcessingOptions, engine: InferenceEngine,
    ) -> StyledResult:
        """Encode, render, infer, extract, deform and build the matrix.

        Raises
        ------
        ThemeStyleError
            On any failure, including errors raised by *engine*.
        """
        logger.info(
            "Applying %s style (intensity %.2f, quality %s)",
            self.theme_id, options.style_intensity, options.quality.value,
        )
        try:
            request = self.prepare_inference_request(mesh, options)
            result = engine.run(self.theme_id, request)
            features = self.extract_style_features(result, options)
            styled_mesh = self.deform_mesh(mesh, features, options)
            matrix = self.transform_matrix(features, options)
        except Exception as exc:
            logger.error("%s style transfer failed: %s", self.display_name, exc)
            if isinstance(exc, ThemeStyleError):
                raise
            raise ThemeStyleError(
                f"{self.display_name} style transfer failed: {exc}", cause=exc) from exc

        logger.info("%s style transfer completed", self.display_name)
        return StyledResult(
            theme_id=self.theme_id,
            styled_mesh=styled_mesh,
            style_features=features,
            transform_matrix=matrix,
            options=options,
        )

    # ── Textures and lighting ──

    def synthesize_textures(
        self, styled: StyledResult, options: ProcessingOptions, rng: np.random.Generator,
    ) -> TexturedResult:
        """Run the theme's layer stack.  Randomness comes only from *rng*."""
        config = self.request_config(options)
        base, strokes = self.skin_texture(config, rng)
        hair = self.hair_texture(config)
        facial_hair = self.facial_hair_texture(config)
        normal, specular = self.surface_maps(config)
        return TexturedResult(
            theme_id=self.theme_id,
            textured_mesh=styled.styled_mesh,
            base_texture=base,
            normal_texture=normal,
            specular_texture=specular,
            hair=hair,
            facial_hair=facial_hair,
            strokes=strokes,
        )

    def compose_lighting(
        self, textured: TexturedResult, options: ProcessingOptions, analysis: LightingAnalysis,
    ) -> LitResult:
        config = self.request_config(options)
        primary, ambient = self.light_setup(analysis, config)
        return LitResult(
            theme_id=self.theme_id,
            final_mesh=textured.textured_mesh,
            lighting=LightingData(
                primary_light=primary,
                ambient_light=ambient,
                shadows=self.shadows(config),
            ),
            atmosphere=self.atmosphere(config),
        )

    # ── Theme hooks ──

    @abstractmethod
    def style_vector_tail(self, indices: NDArray, config: ThemeConfig) -> NDArray:
        """Deterministic values for style-vector slots *indices*."""

    @abstractmethod
    def style_features(self, means: tuple[float, float, float], config: ThemeConfig) -> StyleFeatures:
        """Bias the styled-image channel means into :class:`StyleFeatures`."""

    @abstractmethod
    def displace(
        self, xc: NDArray, yc: NDArray, z: NDArray, features: StyleFeatures, config: ThemeConfig,
    ) -> tuple[NDArray, NDArray, NDArray]:
        """Move face-frame coordinates; may modify the arrays in place."""

    @abstractmethod
    def matrix_scales(
        self, features: StyleFeatures, config: ThemeConfig, intensity: float,
    ) -> tuple[float, float, float]:
        ...

    @abstractmethod
    def skin_texture(
        self, config: ThemeConfig, rng: np.random.Generator,
    ) -> tuple[TextureData, list[StrokeData]]:
        ...

    @abstractmethod
    def hair_texture(self, config: ThemeConfig) -> HairTextureData:
        ...

    def facial_hair_texture(self, config: ThemeConfig) -> Optional[FacialHairData]:
        return None

    @abstractmethod
    def surface_maps(self, config: ThemeConfig) -> tuple[TextureData, TextureData]:
        """Normal and specular maps at ``texture_size``."""

    @abstractmethod
    def light_setup(self, analysis: LightingAnalysis, config: ThemeConfig) -> tuple[LightSource, AmbientLight]:
        ...

    @abstractmethod
    def shadows(self, config: ThemeConfig) -> list[ShadowData]:
        ...

    @abstractmethod
    def atmosphere(self, config: ThemeConfig) -> AtmosphericData:
        ...
