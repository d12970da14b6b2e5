"""Tests for vertex normals and Laplacian smoothing."""

import numpy as np

from facetheme.mesh.smoothing import compute_vertex_normals, laplacian_smooth


TRI_VERTS = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [5, 5, 5]], dtype=float)
TRIS = np.array([[0, 1, 2]])


def test_flat_triangle_normals():
    normals = compute_vertex_normals(TRI_VERTS, TRIS)
    np.testing.assert_array_almost_equal(normals, np.tile([0, 0, 1], (4, 1)))


def test_out_of_range_triangles_ignored():
    normals = compute_vertex_normals(TRI_VERTS[:3], np.array([[0, 2, 1], [0, 1, 9]]))
    np.testing.assert_array_almost_equal(normals, np.tile([0, 0, -1], (3, 1)))


def test_normals_without_triangles():
    normals = compute_vertex_normals(TRI_VERTS, np.zeros((0, 3), dtype=int))
    np.testing.assert_array_equal(normals, np.tile([0, 0, 1], (4, 1)))


def test_one_smoothing_step():
    smoothed = laplacian_smooth(TRI_VERTS, TRIS, iterations=1)
    np.testing.assert_array_almost_equal(smoothed[0], [0.25, 0.25, 0.0])
    np.testing.assert_array_almost_equal(smoothed[1], [0.5, 0.25, 0.0])
    # Isolated vertex stays put
    np.testing.assert_array_equal(smoothed[3], [5, 5, 5])


def test_zero_iterations_copies():
    smoothed = laplacian_smooth(TRI_VERTS, TRIS, iterations=0)
    np.testing.assert_array_equal(smoothed, TRI_VERTS)
    assert smoothed is not TRI_VERTS


def test_smoothing_shrinks_toward_centroid():
    smoothed = laplacian_smooth(TRI_VERTS, TRIS, iterations=10)
    spread = np.linalg.norm(smoothed[:3] - smoothed[:3].mean(axis=0), axis=1)
    assert np.all(spread < 0.1)
