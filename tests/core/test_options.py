"""Tests for processing and mesh generation options."""

import pytest

from facetheme.core.options import (
    MeshGenerationOptions, ProcessingOptions, Quality, Resolution,
)


def test_processing_defaults():
    opts = ProcessingOptions()
    assert opts.quality is Quality.BALANCED
    assert opts.style_intensity == 0.8
    assert opts.preserve_identity == 0.9
    assert opts.output_format == "jpeg"


def test_quality_string_coerced():
    assert ProcessingOptions(quality="high").quality is Quality.HIGH


@pytest.mark.parametrize("kwargs", [
    {"style_intensity": 1.2},
    {"style_intensity": -0.1},
    {"preserve_identity": float("nan")},
    {"output_format": "gif"},
    {"target_width": 0},
    {"quality": "ultra"},
])
def test_invalid_processing_options(kwargs):
    with pytest.raises(ValueError):
        ProcessingOptions(**kwargs)


def test_resolution_vertex_counts():
    assert Resolution.LOW.vertex_count == 20
    assert Resolution.MEDIUM.vertex_count == 50
    assert Resolution.HIGH.vertex_count == 100


def test_mesh_options_for_quality():
    assert MeshGenerationOptions.for_quality("fast").resolution is Resolution.LOW
    assert MeshGenerationOptions.for_quality(Quality.BALANCED).resolution is Resolution.MEDIUM
    opts = MeshGenerationOptions.for_quality("high", smoothing_iterations=0)
    assert opts.resolution is Resolution.HIGH
    assert opts.smoothing_iterations == 0


def test_negative_smoothing_rejected():
    with pytest.raises(ValueError):
        MeshGenerationOptions(smoothing_iterations=-1)
