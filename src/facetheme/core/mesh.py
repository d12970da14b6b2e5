"""Face mesh data structures (numpy arrays, no rendering dependencies).

Meshes are treated as values: every stage that changes geometry returns a
new :class:`FaceMesh` instead of mutating the one it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np
from numpy.typing import NDArray


def _empty(cols: int, dtype=np.float64) -> NDArray:
    return np.zeros((0, cols), dtype=dtype)


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """Axis-aligned bounds of a vertex set."""
    min: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    max: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    @staticmethod
    def from_vertices(vertices: NDArray) -> "BoundingBox":
        """Componentwise min/max; an empty vertex set gives a zero box."""
        if len(vertices) == 0:
            return BoundingBox()
        return BoundingBox(
            min=vertices.min(axis=0).astype(np.float64),
            max=vertices.max(axis=0).astype(np.float64),
        )

    @property
    def center(self) -> NDArray[np.float64]:
        return (self.min + self.max) / 2.0

    @property
    def half_extent(self) -> NDArray[np.float64]:
        return (self.max - self.min) / 2.0


@dataclass(eq=False)
class FaceMesh:
    """Triangulated face surface.

    vertices: (N, 3) float64 positions
    triangles: (M, 3) int64 vertex indices
    uv_mapping: (N, 2) float64, or (0, 2) when UVs were not requested
    normal_map: (N, 3) float64 unit normals, or (0, 3) when not requested
    """
    vertices: NDArray[np.float64]
    triangles: NDArray[np.int64] = field(default_factory=lambda: _empty(3, np.int64))
    uv_mapping: NDArray[np.float64] = field(default_factory=lambda: _empty(2))
    normal_map: NDArray[np.float64] = field(default_factory=lambda: _empty(3))
    bounding_box: BoundingBox = field(default_factory=BoundingBox)

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.triangles = np.asarray(self.triangles, dtype=np.int64).reshape(-1, 3)
        self.uv_mapping = np.asarray(self.uv_mapping, dtype=np.float64).reshape(-1, 2)
        self.normal_map = np.asarray(self.normal_map, dtype=np.float64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def has_normals(self) -> bool:
        return len(self.normal_map) > 0

    def with_vertices(self, vertices: NDArray) -> "FaceMesh":
        """Copy of this mesh with new positions and a refreshed bounding box.

        Triangles, UVs and normals are copied unchanged.
        """
        vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        return replace(
            self.clone(),
            vertices=vertices,
            bounding_box=BoundingBox.from_vertices(vertices),
        )

    def clone(self) -> "FaceMesh":
        """Create a deep copy."""
        return replace(
            self,
            vertices=self.vertices.copy(),
            triangles=self.triangles.copy(),
            uv_mapping=self.uv_mapping.copy(),
            normal_map=self.normal_map.copy(),
            bounding_box=BoundingBox(self.bounding_box.min.copy(), self.bounding_box.max.copy()),
        )


@dataclass(eq=False)
class OptimizedMesh(FaceMesh):
    """A re-indexed, filtered view of a :class:`FaceMesh`.

    ``vertex_count``/``triangle_count`` are properties over the arrays, so
    they always reflect the optimised geometry.
    """
    optimization_level: int = 0
    quality_score: float = 0.0
    target_quality: float = 0.0

    @property
    def meets_target(self) -> bool:
        return self.quality_score >= self.target_quality


# ── Topology helpers ──────────────────────────────────────────────────

def extract_edges(triangles: NDArray) -> NDArray[np.int64]:
    """Unique undirected edges ``(E, 2)`` (sorted pairs) of a triangle array."""
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    if len(tri) == 0:
        return np.zeros((0, 2), dtype=np.int64)
    e01 = np.column_stack([tri[:, 0], tri[:, 1]])
    e12 = np.column_stack([tri[:, 1], tri[:, 2]])
    e20 = np.column_stack([tri[:, 2], tri[:, 0]])
    all_edges = np.concatenate([e01, e12, e20], axis=0)
    sorted_edges = np.sort(all_edges, axis=1)
    # Self-loops appear when merged vertices collapse a triangle
    sorted_edges = sorted_edges[sorted_edges[:, 0] != sorted_edges[:, 1]]
    return np.unique(sorted_edges, axis=0)


def neighbor_counts(edges: NDArray, vertex_count: int) -> NDArray[np.int64]:
    """Number of distinct edge neighbours per vertex."""
    counts = np.zeros(vertex_count, dtype=np.int64)
    np.add.at(counts, edges[:, 0], 1)
    np.add.at(counts, edges[:, 1], 1)
    return counts


def face_frame(mesh: FaceMesh) -> tuple[NDArray, NDArray]:
    """Face-centred 2D coordinates ``(xc, yc)`` in roughly [-1, 1].

    ``xc`` grows to the image right, ``yc`` grows upward (image y is flipped),
    both normalised by the bounding-box half extent so region predicates are
    independent of where the face sits in the frame.
    """
    box = BoundingBox.from_vertices(mesh.vertices)
    center = box.center
    half = np.maximum(box.half_extent, 1e-9)
    xc = (mesh.vertices[:, 0] - center[0]) / half[0]
    yc = -(mesh.vertices[:, 1] - center[1]) / half[1]
    return xc, yc


def from_face_frame(mesh: FaceMesh, xc: NDArray, yc: NDArray) -> tuple[NDArray, NDArray]:
    """Inverse of :func:`face_frame` using the same mesh's bounds."""
    box = BoundingBox.from_vertices(mesh.vertices)
    center = box.center
    half = np.maximum(box.half_extent, 1e-9)
    x = xc * half[0] + center[0]
    y = center[1] - yc * half[1]
    return x, y
