"""Mesh optimisation: vertex welding and triangle clean-up.

Three independent passes run in order:

1. weld vertices whose coordinates agree to ``MERGE_DECIMALS`` places
2. drop degenerate triangles (same test as the builder)
3. drop sliver triangles with aspect ratio below ``MIN_ASPECT_RATIO``

The output is a fixed point: optimising it again changes nothing.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import DEFAULT_TARGET_QUALITY, MERGE_DECIMALS, MIN_ASPECT_RATIO
from facetheme.core.errors import FaceThemeError, MeshOptimizationError
from facetheme.core.math_utils import triangle_aspect_ratios, valid_triangle_mask
from facetheme.core.mesh import BoundingBox, FaceMesh, OptimizedMesh
from facetheme.mesh.quality import compute_quality_metrics

logger = logging.getLogger(__name__)


def weld_vertices(mesh: FaceMesh, decimals: int = MERGE_DECIMALS) -> FaceMesh:
    """Merge vertices that round to the same coordinates.

    The first occurrence of each position survives and keeps its UV and
    normal; surviving vertices stay in their original relative order.
    Triangle indices are remapped onto the welded vertex list.
    """
    n = mesh.vertex_count
    if n == 0:
        return mesh.clone()

    keys = np.round(mesh.vertices, decimals)
    _, first, inverse = np.unique(keys, axis=0, return_index=True, return_inverse=True)
    inverse = inverse.reshape(-1)
    if len(first) == n:
        return mesh.clone()

    order = np.argsort(first)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    remap = rank[inverse]
    keep = first[order]

    vertices = mesh.vertices[keep]
    return FaceMesh(
        vertices=vertices,
        triangles=remap[mesh.triangles] if mesh.triangle_count else mesh.triangles.copy(),
        uv_mapping=mesh.uv_mapping[keep] if len(mesh.uv_mapping) == n else mesh.uv_mapping.copy(),
        normal_map=mesh.normal_map[keep] if len(mesh.normal_map) == n else mesh.normal_map.copy(),
        bounding_box=BoundingBox.from_vertices(vertices),
    )


def _with_triangles(mesh: FaceMesh, triangles: NDArray) -> FaceMesh:
    out = mesh.clone()
    out.triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    return out


def drop_degenerate_triangles(mesh: FaceMesh) -> FaceMesh:
    if mesh.triangle_count == 0:
        return mesh.clone()
    keep = valid_triangle_mask(mesh.vertices, mesh.triangles)
    return _with_triangles(mesh, mesh.triangles[keep])


def drop_sliver_triangles(mesh: FaceMesh, min_aspect: float = MIN_ASPECT_RATIO) -> FaceMesh:
    if mesh.triangle_count == 0:
        return mesh.clone()
    keep = triangle_aspect_ratios(mesh.vertices, mesh.triangles) >= min_aspect
    return _with_triangles(mesh, mesh.triangles[keep])


class MeshOptimizer:
    """Produces an :class:`OptimizedMesh` with a quality score attached."""

    def optimize(self, mesh: FaceMesh, target_quality: float = DEFAULT_TARGET_QUALITY) -> OptimizedMesh:
        try:
            return self._optimize(mesh, target_quality)
        except FaceThemeError:
            raise
        except Exception as exc:
            logger.error("Mesh optimization failed: %s", exc)
            raise MeshOptimizationError(f"Mesh optimization failed: {exc}", cause=exc) from exc

    def _optimize(self, mesh: FaceMesh, target_quality: float) -> OptimizedMesh:
        logger.info(
            "Optimizing mesh: %d vertices, %d triangles (target quality %.2f)",
            mesh.vertex_count, mesh.triangle_count, target_quality,
        )
        level = 0
        current = mesh
        for step in (weld_vertices, drop_degenerate_triangles, drop_sliver_triangles):
            result = step(current)
            if (result.vertex_count, result.triangle_count) != (current.vertex_count, current.triangle_count):
                level += 1
            current = result

        metrics = compute_quality_metrics(current)
        optimized = OptimizedMesh(
            vertices=current.vertices,
            triangles=current.triangles,
            uv_mapping=current.uv_mapping,
            normal_map=current.normal_map,
            bounding_box=BoundingBox.from_vertices(current.vertices),
            optimization_level=level,
            quality_score=metrics.overall_quality,
            target_quality=target_quality,
        )
        logger.info(
            "Optimized mesh: %d -> %d vertices, %d -> %d triangles, quality %.3f",
            mesh.vertex_count, optimized.vertex_count,
            mesh.triangle_count, optimized.triangle_count,
            optimized.quality_score,
        )
        if not optimized.meets_target:
            logger.warning(
                "Mesh quality %.3f below target %.2f", optimized.quality_score, target_quality)
        return optimized
