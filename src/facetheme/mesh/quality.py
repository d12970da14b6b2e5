"""Geometric quality scoring for face meshes.

The validator is advisory: it never raises.  Structural faults (no
vertices, no triangles, out-of-range indices) make the result invalid;
poor scores only add warnings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import (
    IDEAL_VERTEX_TRIANGLE_RATIO,
    QUALITY_WEIGHTS,
    SYMMETRY_TOLERANCE,
    WARN_ASPECT_RATIO,
    WARN_SMOOTHNESS,
    WARN_SYMMETRY,
)
from facetheme.core.math_utils import triangle_aspect_ratios, valid_triangle_mask
from facetheme.core.mesh import BoundingBox, FaceMesh, extract_edges

logger = logging.getLogger(__name__)

# Substituted for any sub-score that cannot be computed
_NEUTRAL_SCORE = 0.5


@dataclass
class MeshQualityMetrics:
    vertex_count: int = 0
    triangle_count: int = 0
    aspect_ratio: float = 0.0
    symmetry_score: float = 0.0
    smoothness_score: float = 0.0
    topology_score: float = 0.0
    overall_quality: float = 0.0

    def scores(self) -> dict[str, float]:
        """The five [0, 1] scores keyed by name."""
        return {
            "aspect_ratio": self.aspect_ratio,
            "symmetry_score": self.symmetry_score,
            "smoothness_score": self.smoothness_score,
            "topology_score": self.topology_score,
            "overall_quality": self.overall_quality,
        }


@dataclass
class MeshValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    quality_metrics: MeshQualityMetrics = field(default_factory=MeshQualityMetrics)


def _guard(score: float) -> float:
    """Replace NaN with the neutral score and clamp to [0, 1]."""
    score = float(score)
    if math.isnan(score):
        return _NEUTRAL_SCORE
    return min(1.0, max(0.0, score))


def _in_range_triangles(mesh: FaceMesh) -> NDArray[np.int64]:
    tri = mesh.triangles
    if len(tri) == 0:
        return tri
    ok = np.all((tri >= 0) & (tri < mesh.vertex_count), axis=1)
    return tri[ok]


# ── Sub-scores ───────────────────────────────────────────────────────

def aspect_ratio_score(vertices: NDArray, triangles: NDArray) -> float:
    """Mean normalised aspect ratio; neutral when there are no triangles."""
    if len(triangles) == 0:
        return _NEUTRAL_SCORE
    ratios = triangle_aspect_ratios(vertices, triangles)
    ratios = ratios[np.isfinite(ratios)]
    if len(ratios) == 0:
        return _NEUTRAL_SCORE
    return float(ratios.mean())


def symmetry_score(vertices: NDArray, tolerance: float = SYMMETRY_TOLERANCE) -> float:
    """Fraction of off-centre vertices with a mirror counterpart.

    A vertex is off-centre when it lies more than *tolerance* from the
    bounding-box centre in x.  Its counterpart must match the mirrored
    x and the original y/z, each within *tolerance* (a Chebyshev ball,
    searched with a k-d tree).
    """
    from scipy.spatial import cKDTree

    if len(vertices) == 0:
        return 1.0
    center_x = BoundingBox.from_vertices(vertices).center[0]
    off_center = np.abs(vertices[:, 0] - center_x) > tolerance
    n_off = int(off_center.sum())
    if n_off == 0:
        return 1.0

    mirrored = vertices[off_center].copy()
    mirrored[:, 0] = 2.0 * center_x - mirrored[:, 0]
    tree = cKDTree(vertices)
    dist, _ = tree.query(mirrored, k=1, p=np.inf, distance_upper_bound=tolerance)
    matched = np.isfinite(dist) & (dist < tolerance)
    return float(matched.sum()) / n_off


def smoothness_score(normals: NDArray, triangles: NDArray) -> float:
    """1 minus the mean normalised angle between neighbouring vertex normals.

    Averaged over vertices that have at least one neighbour; neutral when
    the mesh carries no normals.
    """
    if len(normals) == 0:
        return _NEUTRAL_SCORE
    edges = extract_edges(triangles)
    if len(edges) == 0:
        return _NEUTRAL_SCORE

    dots = np.einsum("ij,ij->i", normals[edges[:, 0]], normals[edges[:, 1]])
    angles = np.arccos(np.clip(dots, -1.0, 1.0)) / np.pi

    n_verts = len(normals)
    angle_sum = np.zeros(n_verts)
    counts = np.zeros(n_verts)
    for side in (0, 1):
        np.add.at(angle_sum, edges[:, side], angles)
        np.add.at(counts, edges[:, side], 1)
    has = counts > 0
    per_vertex = 1.0 - angle_sum[has] / counts[has]
    return float(per_vertex.mean())


def topology_score(vertex_count: int, triangle_count: int, degenerate_count: int) -> float:
    """Penalise degenerate triangles and a vertex/triangle ratio far from 0.5."""
    if triangle_count == 0:
        return _NEUTRAL_SCORE
    score = 1.0 - 0.5 * (degenerate_count / triangle_count)
    ratio = vertex_count / max(1, triangle_count)
    ideal = IDEAL_VERTEX_TRIANGLE_RATIO
    score *= 1.0 - abs(ratio - ideal) / ideal
    return score


def compute_quality_metrics(mesh: FaceMesh) -> MeshQualityMetrics:
    """All sub-scores plus the weighted overall quality, each in [0, 1].

    Only triangles whose indices are in range contribute.
    """
    tri = _in_range_triangles(mesh)
    vertices = mesh.vertices
    normals = mesh.normal_map if len(mesh.normal_map) == mesh.vertex_count else np.zeros((0, 3))
    degenerate = int((~valid_triangle_mask(vertices, tri)).sum()) if len(tri) else 0

    aspect = _guard(aspect_ratio_score(vertices, tri))
    symmetry = _guard(symmetry_score(vertices))
    smoothness = _guard(smoothness_score(normals, tri))
    topology = _guard(topology_score(mesh.vertex_count, mesh.triangle_count, degenerate))

    overall = (
        aspect * QUALITY_WEIGHTS["aspect_ratio"]
        + symmetry * QUALITY_WEIGHTS["symmetry_score"]
        + smoothness * QUALITY_WEIGHTS["smoothness_score"]
        + topology * QUALITY_WEIGHTS["topology_score"]
    )
    return MeshQualityMetrics(
        vertex_count=mesh.vertex_count,
        triangle_count=mesh.triangle_count,
        aspect_ratio=aspect,
        symmetry_score=symmetry,
        smoothness_score=smoothness,
        topology_score=topology,
        overall_quality=_guard(overall),
    )


class MeshQualityValidator:
    """Structural checks plus quality metrics for a :class:`FaceMesh`."""

    def validate(self, mesh: FaceMesh) -> MeshValidationResult:
        try:
            return self._validate(mesh)
        except Exception as exc:
            logger.error("Mesh validation failed: %s", exc)
            return MeshValidationResult(
                is_valid=False,
                errors=[f"Validation failed: {exc}"],
                quality_metrics=MeshQualityMetrics(),
            )

    def _validate(self, mesh: FaceMesh) -> MeshValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if mesh.vertex_count == 0:
            errors.append("Mesh has no vertices")
        if mesh.triangle_count == 0:
            errors.append("Mesh has no triangles")

        tri = mesh.triangles
        bad = tri[(tri < 0) | (tri >= mesh.vertex_count)]
        for index in np.unique(bad):
            errors.append(f"Invalid vertex index: {int(index)}")

        in_range = _in_range_triangles(mesh)
        degenerate = int((~valid_triangle_mask(mesh.vertices, in_range)).sum()) if len(in_range) else 0
        if degenerate:
            warnings.append(f"Found {degenerate} degenerate triangles")

        metrics = compute_quality_metrics(mesh)
        if metrics.aspect_ratio < WARN_ASPECT_RATIO:
            warnings.append("Poor triangle aspect ratios detected")
        if metrics.symmetry_score < WARN_SYMMETRY:
            warnings.append("Face mesh lacks symmetry")
        if metrics.smoothness_score < WARN_SMOOTHNESS:
            warnings.append("Mesh surface is not smooth")

        result = MeshValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            quality_metrics=metrics,
        )
        logger.info(
            "Mesh validation: valid=%s quality=%.3f (%d errors, %d warnings)",
            result.is_valid, metrics.overall_quality, len(errors), len(warnings),
        )
        for w in warnings:
            logger.debug("Mesh warning: %s", w)
        return result
