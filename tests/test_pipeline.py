"""End-to-end pipeline tests."""

import numpy as np
import pytest

from facetheme.core.errors import InsufficientLandmarksError, MeshGenerationError
from facetheme.core.options import ProcessingOptions
from facetheme.mesh.quality import MeshValidationResult
from facetheme.pipeline import FaceStylePipeline


class _RejectingValidator:
    def validate(self, mesh):
        return MeshValidationResult(is_valid=False, errors=["Mesh has no triangles"])


def test_barbarian_end_to_end(landmarks, engine):
    result = FaceStylePipeline(engine).run(landmarks, "barbarian")
    assert result.validation.is_valid
    assert result.mesh.vertex_count <= 80
    assert result.styled.theme_id == "barbarian"
    assert result.textured.base_texture.width == 512
    assert result.lit.final_mesh is result.styled.styled_mesh
    assert 0.0 <= result.mesh.quality_score <= 1.0


def test_same_seed_is_reproducible(landmarks, engine):
    pipeline = FaceStylePipeline(engine)
    options = ProcessingOptions(quality="high", style_intensity=1.0)
    a = pipeline.run(landmarks, "barbarian", options, seed=9)
    b = pipeline.run(landmarks, "barbarian", options, seed=9)
    np.testing.assert_array_equal(a.styled.styled_mesh.vertices, b.styled.styled_mesh.vertices)
    assert a.textured.base_texture.tobytes() == b.textured.base_texture.tobytes()
    assert a.textured.strokes == b.textured.strokes
    assert a.lit.lighting == b.lit.lighting


def test_fast_quality_uses_low_resolution(landmarks, engine):
    result = FaceStylePipeline(engine).run(landmarks, "greek", ProcessingOptions(quality="fast"))
    assert result.mesh.vertex_count <= 50


def test_invalid_landmarks_stop_pipeline(landmarks, engine):
    with pytest.raises(InsufficientLandmarksError):
        FaceStylePipeline(engine).run(landmarks[:20], "greek")


def test_validation_gate(landmarks, engine):
    pipeline = FaceStylePipeline(engine)
    pipeline.validator = _RejectingValidator()
    with pytest.raises(MeshGenerationError, match="failed validation"):
        pipeline.run(landmarks, "mystic")


def test_gate_can_be_disabled(landmarks, engine):
    pipeline = FaceStylePipeline(engine, require_valid_mesh=False)
    pipeline.validator = _RejectingValidator()
    result = pipeline.run(landmarks, "mystic")
    assert not result.validation.is_valid
    assert result.lit.theme_id == "mystic"
