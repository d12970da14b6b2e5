"""End-to-end synchronous pipeline for one face.

build -> optimize -> validate (optional gate) -> style -> texture -> lighting

The pipeline object keeps no per-request state, so one instance may serve
concurrent requests as long as its inference engine is thread-safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from facetheme.constants import DEFAULT_TARGET_QUALITY
from facetheme.core.errors import MeshGenerationError
from facetheme.core.landmarks import FacialLandmark
from facetheme.core.mesh import OptimizedMesh
from facetheme.core.options import MeshGenerationOptions, ProcessingOptions
from facetheme.lighting.composer import compose_lighting
from facetheme.lighting.model import LightingAnalysis, LitResult
from facetheme.mesh.builder import FaceMeshBuilder
from facetheme.mesh.optimizer import MeshOptimizer
from facetheme.mesh.quality import MeshQualityValidator, MeshValidationResult
from facetheme.styling.base import ThemeStyle
from facetheme.styling.features import StyledResult
from facetheme.styling.inference import InferenceEngine
from facetheme.styling.registry import resolve_theme
from facetheme.texture.data import TexturedResult
from facetheme.texture.synthesizer import synthesize_textures

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PipelineResult:
    mesh: OptimizedMesh
    validation: MeshValidationResult
    styled: StyledResult
    textured: TexturedResult
    lit: LitResult


class FaceStylePipeline:
    """Runs every stage for one landmark set and theme.

    Parameters
    ----------
    engine : style-inference engine called once per request
    require_valid_mesh : treat an invalid optimised mesh as fatal
    target_quality : quality score the optimiser is asked to reach
    """

    def __init__(
        self,
        engine: InferenceEngine,
        require_valid_mesh: bool = True,
        target_quality: float = DEFAULT_TARGET_QUALITY,
    ):
        self.engine = engine
        self.require_valid_mesh = require_valid_mesh
        self.target_quality = target_quality
        self.builder = FaceMeshBuilder()
        self.optimizer = MeshOptimizer()
        self.validator = MeshQualityValidator()

    def run(
        self,
        landmarks: Sequence[FacialLandmark],
        theme: Union[str, ThemeStyle],
        options: Optional[ProcessingOptions] = None,
        seed: int = 0,
        lighting: Optional[LightingAnalysis] = None,
    ) -> PipelineResult:
        if options is None:
            options = ProcessingOptions()
        style = resolve_theme(theme)
        logger.info(
            "Pipeline start: theme=%s, %d landmarks, quality=%s",
            style.theme_id, len(landmarks), options.quality.value,
        )

        raw = self.builder.build(landmarks, MeshGenerationOptions.for_quality(options.quality))
        mesh = self.optimizer.optimize(raw, self.target_quality)
        validation = self.validator.validate(mesh)
        for warning in validation.warnings:
            logger.warning("Mesh validation: %s", warning)
        if self.require_valid_mesh and not validation.is_valid:
            logger.error("Optimized mesh is invalid: %s", "; ".join(validation.errors))
            raise MeshGenerationError(
                "Generated mesh failed validation: " + "; ".join(validation.errors))

        styled = style.apply_style(mesh, options, self.engine)
        textured = synthesize_textures(style, styled, options, seed=seed)
        lit = compose_lighting(style, textured, options, lighting)

        logger.info(
            "Pipeline done: theme=%s, %d vertices, quality %.3f",
            style.theme_id, mesh.vertex_count, mesh.quality_score,
        )
        return PipelineResult(
            mesh=mesh,
            validation=validation,
            styled=styled,
            textured=textured,
            lit=lit,
        )
