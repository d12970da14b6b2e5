"""Tests for MeshOptimizer and its clean-up passes."""

import logging

import numpy as np
import pytest

from facetheme.core.errors import MeshOptimizationError
from facetheme.core.mesh import FaceMesh, OptimizedMesh
from facetheme.mesh.optimizer import (
    MeshOptimizer, drop_degenerate_triangles, drop_sliver_triangles, weld_vertices,
)


def _duplicated():
    verts = np.array([
        [0.0, 0.0, 0.0],
        [0.1, 0.0, 0.0],
        [0.0, 0.1, 0.0],
        [0.0, 0.0, 1e-9],  # rounds onto vertex 0
    ])
    return FaceMesh(
        vertices=verts,
        triangles=[[0, 1, 2], [3, 1, 2]],
        uv_mapping=[[0.1, 0.1], [0.2, 0.2], [0.3, 0.3], [0.9, 0.9]],
        normal_map=np.tile([0.0, 0.0, 1.0], (4, 1)),
    )


def test_weld_merges_duplicates():
    welded = weld_vertices(_duplicated())
    assert welded.vertex_count == 3
    np.testing.assert_array_equal(welded.triangles, [[0, 1, 2], [0, 1, 2]])
    # First occurrence keeps its UV
    np.testing.assert_array_almost_equal(welded.uv_mapping[0], [0.1, 0.1])
    assert welded.normal_map.shape == (3, 3)


def test_weld_keeps_order():
    verts = np.array([[0.5, 0, 0], [0.1, 0, 0], [0.5, 0, 0], [0.3, 0, 0]])
    welded = weld_vertices(FaceMesh(vertices=verts, triangles=[[0, 1, 3], [2, 1, 3]]))
    np.testing.assert_array_equal(welded.vertices[:, 0], [0.5, 0.1, 0.3])
    np.testing.assert_array_equal(welded.triangles, [[0, 1, 2], [0, 1, 2]])


def test_drop_degenerate():
    verts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [2, 0, 0]], dtype=float)
    mesh = FaceMesh(vertices=verts, triangles=[[0, 1, 2], [0, 1, 3]])
    np.testing.assert_array_equal(drop_degenerate_triangles(mesh).triangles, [[0, 1, 2]])


def test_drop_sliver():
    verts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0.5, 0.02, 0]], dtype=float)
    mesh = FaceMesh(vertices=verts, triangles=[[0, 1, 2], [0, 1, 3]])
    np.testing.assert_array_equal(drop_sliver_triangles(mesh).triangles, [[0, 1, 2]])


def test_optimize_counts_changed_steps():
    result = MeshOptimizer().optimize(_duplicated())
    assert isinstance(result, OptimizedMesh)
    assert result.vertex_count == 3
    assert result.triangle_count == 2
    assert result.optimization_level == 1


def test_optimize_does_not_mutate_input():
    mesh = _duplicated()
    MeshOptimizer().optimize(mesh)
    assert mesh.vertex_count == 4
    np.testing.assert_array_equal(mesh.triangles, [[0, 1, 2], [3, 1, 2]])


def test_optimized_mesh_is_fixed_point(built_mesh):
    once = MeshOptimizer().optimize(built_mesh)
    twice = MeshOptimizer().optimize(once)
    assert twice.optimization_level == 0
    np.testing.assert_array_equal(once.vertices, twice.vertices)
    np.testing.assert_array_equal(once.triangles, twice.triangles)
    assert once.quality_score == pytest.approx(twice.quality_score)


def test_optimized_built_mesh(built_mesh, optimized_mesh):
    assert optimized_mesh.vertex_count <= built_mesh.vertex_count
    assert optimized_mesh.triangle_count > 0
    assert optimized_mesh.triangles.max() < optimized_mesh.vertex_count
    assert 0.0 <= optimized_mesh.quality_score <= 1.0
    assert optimized_mesh.uv_mapping.shape == (optimized_mesh.vertex_count, 2)


def test_target_quality(caplog):
    with caplog.at_level(logging.WARNING, logger="facetheme.mesh.optimizer"):
        result = MeshOptimizer().optimize(_duplicated(), target_quality=1.5)
    assert not result.meets_target
    assert "below target" in caplog.text
    assert MeshOptimizer().optimize(_duplicated(), target_quality=0.0).meets_target


def test_empty_mesh():
    result = MeshOptimizer().optimize(FaceMesh(vertices=np.zeros((0, 3))))
    assert result.vertex_count == 0
    assert 0.0 <= result.quality_score <= 1.0


def test_bad_index_is_wrapped():
    mesh = FaceMesh(vertices=np.eye(3), triangles=[[0, 1, 5]])
    with pytest.raises(MeshOptimizationError) as excinfo:
        MeshOptimizer().optimize(mesh)
    assert isinstance(excinfo.value.__cause__, IndexError)
