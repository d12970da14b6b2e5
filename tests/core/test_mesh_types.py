"""Tests for FaceMesh, OptimizedMesh and topology helpers."""

import numpy as np

from facetheme.core.mesh import (
    BoundingBox, FaceMesh, OptimizedMesh, extract_edges, face_frame,
    from_face_frame, neighbor_counts,
)


def _square():
    verts = np.array([[0, 0, 0], [2, 0, 0], [2, 4, 0], [0, 4, 1]], dtype=float)
    return FaceMesh(vertices=verts, triangles=[[0, 1, 2], [0, 2, 3]])


def test_bounding_box():
    box = BoundingBox.from_vertices(_square().vertices)
    np.testing.assert_array_equal(box.min, [0, 0, 0])
    np.testing.assert_array_equal(box.max, [2, 4, 1])
    np.testing.assert_array_equal(box.center, [1, 2, 0.5])


def test_empty_bounding_box():
    box = BoundingBox.from_vertices(np.zeros((0, 3)))
    np.testing.assert_array_equal(box.min, [0, 0, 0])


def test_arrays_are_normalised():
    mesh = _square()
    assert mesh.triangles.dtype == np.int64
    assert mesh.uv_mapping.shape == (0, 2)
    assert not mesh.has_normals
    assert mesh.vertex_count == 4
    assert mesh.triangle_count == 2


def test_with_vertices_returns_new_mesh():
    mesh = _square()
    moved = mesh.with_vertices(mesh.vertices * 2)
    assert moved is not mesh
    np.testing.assert_array_equal(mesh.vertices[1], [2, 0, 0])
    np.testing.assert_array_equal(moved.bounding_box.max, [4, 8, 2])
    moved.triangles[0, 0] = 3
    assert mesh.triangles[0, 0] == 0


def test_clone_is_deep():
    mesh = _square()
    copy = mesh.clone()
    copy.vertices[0, 0] = 9.0
    assert mesh.vertices[0, 0] == 0.0


def test_optimized_mesh_meets_target():
    mesh = OptimizedMesh(vertices=np.zeros((1, 3)), quality_score=0.8, target_quality=0.8)
    assert mesh.meets_target
    mesh.target_quality = 0.9
    assert not mesh.meets_target


def test_extract_edges():
    edges = extract_edges(np.array([[0, 1, 2], [0, 2, 3]]))
    np.testing.assert_array_equal(edges, [[0, 1], [0, 2], [0, 3], [1, 2], [2, 3]])
    np.testing.assert_array_equal(neighbor_counts(edges, 5), [3, 2, 3, 2, 0])


def test_extract_edges_drops_self_loops():
    edges = extract_edges(np.array([[0, 0, 1]]))
    np.testing.assert_array_equal(edges, [[0, 1]])


def test_face_frame_round_trip():
    mesh = _square()
    xc, yc = face_frame(mesh)
    np.testing.assert_array_almost_equal(xc, [-1, 1, 1, -1])
    # Image y grows downward; the face frame grows upward
    np.testing.assert_array_almost_equal(yc, [1, 1, -1, -1])
    x, y = from_face_frame(mesh, xc, yc)
    np.testing.assert_array_almost_equal(x, mesh.vertices[:, 0])
    np.testing.assert_array_almost_equal(y, mesh.vertices[:, 1])
