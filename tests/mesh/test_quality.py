"""Tests for mesh quality metrics and the validator."""

import numpy as np
import pytest

from facetheme.core.mesh import FaceMesh
from facetheme.mesh.quality import (
    MeshQualityValidator, compute_quality_metrics, smoothness_score,
    symmetry_score, topology_score,
)


def _assert_bounded(metrics):
    for name, value in metrics.scores().items():
        assert 0.0 <= value <= 1.0, name


def test_built_mesh_is_valid(built_mesh):
    result = MeshQualityValidator().validate(built_mesh)
    assert result.is_valid
    assert result.errors == []
    assert result.quality_metrics.vertex_count == 80
    assert result.quality_metrics.overall_quality > 0.0
    _assert_bounded(result.quality_metrics)


def test_empty_mesh():
    result = MeshQualityValidator().validate(FaceMesh(vertices=np.zeros((0, 3))))
    assert not result.is_valid
    assert "Mesh has no vertices" in result.errors
    assert "Mesh has no triangles" in result.errors
    _assert_bounded(result.quality_metrics)


def test_out_of_range_index():
    mesh = FaceMesh(vertices=np.eye(3), triangles=[[0, 1, 2], [0, 1, 7]])
    result = MeshQualityValidator().validate(mesh)
    assert not result.is_valid
    assert result.errors == ["Invalid vertex index: 7"]
    _assert_bounded(result.quality_metrics)


def test_coincident_vertices():
    mesh = FaceMesh(vertices=np.zeros((3, 3)), triangles=[[0, 1, 2]])
    result = MeshQualityValidator().validate(mesh)
    assert result.is_valid
    assert "Found 1 degenerate triangles" in result.warnings
    assert "Poor triangle aspect ratios detected" in result.warnings
    _assert_bounded(result.quality_metrics)


def test_nan_vertices_never_raise():
    verts = np.array([[0, 0, 0], [np.nan, 0, 0], [0, 1, 0]], dtype=float)
    result = MeshQualityValidator().validate(FaceMesh(vertices=verts, triangles=[[0, 1, 2]]))
    _assert_bounded(result.quality_metrics)


def test_internal_failure_is_reported(monkeypatch, built_mesh):
    def boom(mesh):
        raise RuntimeError("kaboom")

    monkeypatch.setattr("facetheme.mesh.quality.compute_quality_metrics", boom)
    result = MeshQualityValidator().validate(built_mesh)
    assert not result.is_valid
    assert result.errors == ["Validation failed: kaboom"]
    assert result.quality_metrics.overall_quality == 0.0


def test_symmetry_score():
    symmetric = np.array([[-1, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
    assert symmetry_score(symmetric) == 1.0
    lopsided = np.array([[-1, 0, 0], [1, 0.5, 0], [0, 1, 0]], dtype=float)
    assert symmetry_score(lopsided) == 0.0


def test_symmetry_without_off_centre_vertices():
    assert symmetry_score(np.zeros((4, 3))) == 1.0
    assert symmetry_score(np.zeros((0, 3))) == 1.0


def test_smoothness_score():
    tris = np.array([[0, 1, 2]])
    assert smoothness_score(np.tile([0.0, 0.0, 1.0], (3, 1)), tris) == pytest.approx(1.0)
    assert smoothness_score(np.zeros((0, 3)), tris) == 0.5
    opposed = np.array([[0, 0, 1], [0, 0, -1], [0, 0, 1]], dtype=float)
    assert smoothness_score(opposed, tris) < 1.0


def test_topology_score():
    assert topology_score(10, 20, 0) == pytest.approx(1.0)
    assert topology_score(10, 20, 4) == pytest.approx(0.9)
    assert topology_score(10, 0, 0) == 0.5


def test_overall_is_weighted_sum(built_mesh):
    m = compute_quality_metrics(built_mesh)
    expected = (0.3 * m.aspect_ratio + 0.25 * m.symmetry_score
                + 0.25 * m.smoothness_score + 0.2 * m.topology_score)
    assert m.overall_quality == pytest.approx(expected)
