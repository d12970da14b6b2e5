"""Laplacian smoothing and per-vertex normal accumulation.

Both operate on plain arrays and return new arrays; the caller wraps the
result in a fresh :class:`~facetheme.core.mesh.FaceMesh`.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import DEFAULT_NORMAL, SMOOTHING_FACTOR
from facetheme.core.math_utils import face_normals
from facetheme.core.mesh import extract_edges, neighbor_counts

logger = logging.getLogger(__name__)


def compute_vertex_normals(vertices: NDArray, triangles: NDArray) -> NDArray[np.float64]:
    """Area-independent vertex normals: mean of adjacent unit face normals.

    Vertices that touch no triangle, or whose face normals cancel out,
    get ``DEFAULT_NORMAL``.  Triangles referencing out-of-range indices
    are ignored.
    """
    n_verts = len(vertices)
    normals = np.tile(np.asarray(DEFAULT_NORMAL, dtype=np.float64), (n_verts, 1))
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    if n_verts == 0 or len(tri) == 0:
        return normals

    in_range = np.all((tri >= 0) & (tri < n_verts), axis=1)
    tri = tri[in_range]
    if len(tri) == 0:
        return normals

    fn = face_normals(vertices, tri)
    accum = np.zeros((n_verts, 3), dtype=np.float64)
    counts = np.zeros(n_verts, dtype=np.int64)
    for corner in range(3):
        np.add.at(accum, tri[:, corner], fn)
        np.add.at(counts, tri[:, corner], 1)

    touched = counts > 0
    accum[touched] /= counts[touched, np.newaxis]
    lengths = np.linalg.norm(accum, axis=1)
    ok = touched & (lengths > 1e-12)
    normals[ok] = accum[ok] / lengths[ok, np.newaxis]
    return normals


def laplacian_smooth(
    vertices: NDArray,
    triangles: NDArray,
    iterations: int,
    factor: float = SMOOTHING_FACTOR,
) -> NDArray[np.float64]:
    """Blend each vertex toward the mean of its edge neighbours.

    Each iteration is a Jacobi step: every vertex reads the previous
    iteration's positions.  Neighbours are de-duplicated through the
    unique edge set, so a vertex shared by many triangles is not
    over-weighted.  Isolated vertices do not move.

    Parameters
    ----------
    vertices : (N, 3) positions
    triangles : (M, 3) indices
    iterations : number of smoothing passes
    factor : 0 keeps the original position, 1 replaces it by the average

    Returns
    -------
    (N, 3) smoothed copy of *vertices*
    """
    pos = np.array(vertices, dtype=np.float64, copy=True)
    if iterations <= 0 or len(pos) == 0 or len(triangles) == 0:
        return pos

    edges = extract_edges(triangles)
    if len(edges) == 0:
        return pos
    counts = neighbor_counts(edges, len(pos))
    has_neighbors = counts > 0

    for _ in range(iterations):
        sums = np.zeros_like(pos)
        np.add.at(sums, edges[:, 0], pos[edges[:, 1]])
        np.add.at(sums, edges[:, 1], pos[edges[:, 0]])
        avg = pos.copy()
        avg[has_neighbors] = sums[has_neighbors] / counts[has_neighbors, np.newaxis]
        pos = pos + (avg - pos) * factor

    logger.debug("Smoothed %d vertices over %d iterations", len(pos), iterations)
    return pos
