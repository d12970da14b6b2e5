"""NumPy-backed math utilities: scale matrices, luma and triangle kernels.

Triangle kernels take a ``(V, 3)`` position array and a ``(T, 3)`` index
array and return one value per triangle, so the builder, optimizer and
validator share a single definition of "degenerate" and "aspect ratio".
"""

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import DEFAULT_NORMAL, MIN_EDGE_LENGTH, MIN_TRIANGLE_AREA

# Type aliases
Mat4 = NDArray[np.float64]


def mat4_scale(sx: float, sy: float, sz: float) -> Mat4:
    m = np.eye(4, dtype=np.float64)
    m[0, 0] = sx
    m[1, 1] = sy
    m[2, 2] = sz
    return m


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def luminance(rgb) -> float:
    """Rec. 601 luma of an RGB triple."""
    r, g, b = rgb
    return 0.299 * r + 0.587 * g + 0.114 * b


# ── Triangle kernels ──────────────────────────────────────────────────

def triangle_corners(positions: NDArray, triangles: NDArray) -> tuple[NDArray, NDArray, NDArray]:
    """Gather the three corner arrays ``(T, 3)`` of every triangle."""
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    return positions[tri[:, 0]], positions[tri[:, 1]], positions[tri[:, 2]]


def triangle_edge_lengths(positions: NDArray, triangles: NDArray) -> NDArray:
    """Edge lengths ``(T, 3)`` ordered (v0-v1, v1-v2, v2-v0)."""
    v0, v1, v2 = triangle_corners(positions, triangles)
    return np.column_stack([
        np.linalg.norm(v1 - v0, axis=1),
        np.linalg.norm(v2 - v1, axis=1),
        np.linalg.norm(v0 - v2, axis=1),
    ])


def triangle_areas(positions: NDArray, triangles: NDArray) -> NDArray:
    """Unsigned triangle areas from the edge cross product."""
    v0, v1, v2 = triangle_corners(positions, triangles)
    return np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1) / 2.0


def valid_triangle_mask(positions: NDArray, triangles: NDArray) -> NDArray:
    """True where a triangle is non-degenerate.

    A triangle is degenerate when any edge is shorter than
    ``MIN_EDGE_LENGTH`` (coincident corners) or its area does not exceed
    ``MIN_TRIANGLE_AREA`` (colinear corners).
    """
    if len(triangles) == 0:
        return np.zeros(0, dtype=bool)
    edges = triangle_edge_lengths(positions, triangles)
    areas = triangle_areas(positions, triangles)
    return (edges.min(axis=1) >= MIN_EDGE_LENGTH) & (areas > MIN_TRIANGLE_AREA)


def triangle_aspect_ratios(positions: NDArray, triangles: NDArray) -> NDArray:
    """Normalised aspect ratio ``4*sqrt(3)*area / longest_edge**2`` in [0, 1].

    Area comes from Heron's formula.  Equilateral triangles score 1.0;
    triangles with a coincident corner or a non-positive Heron discriminant
    score 0.0.
    """
    if len(triangles) == 0:
        return np.zeros(0, dtype=np.float64)
    edges = triangle_edge_lengths(positions, triangles)
    a, b, c = edges[:, 0], edges[:, 1], edges[:, 2]
    s = (a + b + c) / 2.0
    disc = s * (s - a) * (s - b) * (s - c)
    longest = edges.max(axis=1)

    ok = (edges.min(axis=1) >= MIN_EDGE_LENGTH) & (disc > 0) & (longest > 0)
    ratios = np.zeros(len(edges), dtype=np.float64)
    area = np.sqrt(disc[ok])
    ratios[ok] = (4.0 * np.sqrt(3.0) * area) / (longest[ok] * longest[ok])
    ratios = np.where(np.isnan(ratios), 0.0, ratios)
    return np.clip(ratios, 0.0, 1.0)


def face_normals(positions: NDArray, triangles: NDArray) -> NDArray:
    """Unit face normals ``(T, 3)``; degenerate faces get ``DEFAULT_NORMAL``."""
    v0, v1, v2 = triangle_corners(positions, triangles)
    n = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(n, axis=1)
    out = np.tile(np.asarray(DEFAULT_NORMAL, dtype=np.float64), (len(n), 1))
    ok = lengths > 0
    out[ok] = n[ok] / lengths[ok, np.newaxis]
    return out
