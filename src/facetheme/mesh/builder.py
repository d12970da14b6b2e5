"""Build a triangulated 3D face mesh from sparse 2D landmarks.

Each landmark becomes a vertex whose depth comes from the anatomical depth
table.  Extra vertices are interpolated along the key features (eyes,
nose, mouth corners, chin) to densify the surface before triangulation.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import (
    FACE_LOCAL_DISTANCE,
    KEY_LANDMARK_TYPES,
    MIN_LANDMARK_COUNT,
    REQUIRED_LANDMARK_TYPES,
    TRIANGLE_LOCALITY,
    TRIANGLES_PER_VERTEX_CAP,
)
from facetheme.core.errors import (
    FaceThemeError,
    InsufficientLandmarksError,
    LandmarkOutOfRangeError,
    MeshGenerationError,
)
from facetheme.core.landmarks import FacialLandmark
from facetheme.core.math_utils import triangle_edge_lengths, valid_triangle_mask
from facetheme.core.mesh import BoundingBox, FaceMesh
from facetheme.core.options import MeshGenerationOptions
from facetheme.mesh.smoothing import compute_vertex_normals, laplacian_smooth

logger = logging.getLogger(__name__)


class FaceMeshBuilder:
    """Turns a landmark set into a :class:`FaceMesh`.

    The builder holds no per-request state; one instance can serve any
    number of concurrent requests.
    """

    def build(
        self,
        landmarks: Sequence[FacialLandmark],
        options: Optional[MeshGenerationOptions] = None,
    ) -> FaceMesh:
        """Validate *landmarks* and build a mesh.

        Raises
        ------
        InsufficientLandmarksError
            Fewer than 27 landmarks, or a required type is missing.
        LandmarkOutOfRangeError
            A coordinate lies outside [0, 1] or is not finite.
        MeshGenerationError
            Any other failure during synthesis.
        """
        if options is None:
            options = MeshGenerationOptions()
        landmarks = list(landmarks)
        validate_landmarks(landmarks)

        try:
            return self._build(landmarks, options)
        except FaceThemeError:
            raise
        except Exception as exc:
            logger.error("Mesh generation failed: %s", exc)
            raise MeshGenerationError(f"Mesh generation failed: {exc}", cause=exc) from exc

    def _build(self, landmarks: list[FacialLandmark], options: MeshGenerationOptions) -> FaceMesh:
        vertices = generate_vertices(landmarks, options.resolution.vertex_count)
        triangles = triangulate(vertices)
        triangles = filter_face_local(vertices, triangles)

        uv = generate_uv_mapping(vertices) if options.generate_uv_mapping else None
        normals = compute_vertex_normals(vertices, triangles) if options.generate_normals else None

        if options.smoothing_iterations > 0 and len(triangles) > 0:
            vertices = laplacian_smooth(vertices, triangles, options.smoothing_iterations)
            if options.generate_normals:
                normals = compute_vertex_normals(vertices, triangles)

        mesh = FaceMesh(
            vertices=vertices,
            triangles=triangles,
            uv_mapping=uv if uv is not None else np.zeros((0, 2)),
            normal_map=normals if normals is not None else np.zeros((0, 3)),
            bounding_box=BoundingBox.from_vertices(vertices),
        )
        logger.info(
            "Built face mesh: %d vertices, %d triangles (%s resolution)",
            mesh.vertex_count, mesh.triangle_count, options.resolution.value,
        )
        return mesh


# ── Input validation ─────────────────────────────────────────────────

def validate_landmarks(landmarks: Sequence[FacialLandmark]) -> None:
    """Check count, required types and coordinate range, in that order."""
    if len(landmarks) < MIN_LANDMARK_COUNT:
        raise InsufficientLandmarksError(
            f"Insufficient landmarks for mesh generation: got {len(landmarks)}, "
            f"need at least {MIN_LANDMARK_COUNT}"
        )

    present = {lm.type.value for lm in landmarks}
    missing = [t for t in REQUIRED_LANDMARK_TYPES if t not in present]
    if missing:
        raise InsufficientLandmarksError(
            f"Missing required landmark types: {', '.join(missing)}"
        )

    for lm in landmarks:
        if not lm.in_unit_range:
            raise LandmarkOutOfRangeError(
                f"Landmark {lm.type.value} out of range: ({lm.x}, {lm.y})"
            )


# ── Vertex synthesis ─────────────────────────────────────────────────

def generate_vertices(landmarks: Sequence[FacialLandmark], extra_count: int) -> NDArray[np.float64]:
    """Landmark vertices ``(x, y, depth)`` followed by *extra_count* interpolated ones."""
    base = np.array([(lm.x, lm.y, lm.depth) for lm in landmarks], dtype=np.float64).reshape(-1, 3)
    keys = np.array(
        [(lm.x, lm.y, lm.depth) for lm in landmarks if lm.type.value in KEY_LANDMARK_TYPES],
        dtype=np.float64,
    ).reshape(-1, 3)
    extra = interpolate_key_path(keys, extra_count)
    return np.vstack([base, extra])


def interpolate_key_path(keys: NDArray, count: int) -> NDArray[np.float64]:
    """Sample *count* points along the polyline through *keys*.

    Point ``i`` sits at ``t = i / count`` of the way along, so ``t`` spans
    [0, 1) and the final key point itself is never emitted.
    """
    if count <= 0 or len(keys) == 0:
        return np.zeros((0, 3), dtype=np.float64)
    if len(keys) == 1:
        return np.repeat(keys, count, axis=0)

    t = np.arange(count, dtype=np.float64) / count
    segment = t * (len(keys) - 1)
    index = np.floor(segment).astype(np.int64)
    next_index = np.minimum(index + 1, len(keys) - 1)
    local_t = (segment - index)[:, np.newaxis]
    return keys[index] + (keys[next_index] - keys[index]) * local_t


# ── Triangulation ────────────────────────────────────────────────────

def triangulate(vertices: NDArray) -> NDArray[np.int64]:
    """Local triangulation over candidate triples ``i < j < k``.

    Triples are visited lexicographically and accepted when they are
    non-degenerate and no edge reaches ``TRIANGLE_LOCALITY``.  Collection
    stops at ``TRIANGLES_PER_VERTEX_CAP * len(vertices)`` triangles.  Every
    triangle is wound so its face normal points toward +z (the viewer).
    """
    n = len(vertices)
    if n < 3:
        return np.zeros((0, 3), dtype=np.int64)

    cap = TRIANGLES_PER_VERTEX_CAP * n
    accepted: list[NDArray] = []
    total = 0
    for i in range(n - 2):
        rest = np.arange(i + 1, n)
        jj, kk = np.triu_indices(len(rest), k=1)
        if len(jj) == 0:
            continue
        cand = np.column_stack([np.full(len(jj), i), rest[jj], rest[kk]]).astype(np.int64)
        keep = valid_triangle_mask(vertices, cand)
        keep &= triangle_edge_lengths(vertices, cand).max(axis=1) < TRIANGLE_LOCALITY
        cand = cand[keep]
        if len(cand) == 0:
            continue
        take = min(len(cand), cap - total)
        accepted.append(cand[:take])
        total += take
        if total >= cap:
            break

    if total == 0:
        logger.warning("No local triangles found for %d vertices; using fan triangulation", n)
        fan = np.column_stack([
            np.zeros(n - 2, dtype=np.int64),
            np.arange(1, n - 1),
            np.arange(2, n),
        ]).astype(np.int64)
        triangles = fan[valid_triangle_mask(vertices, fan)][:cap]
    else:
        triangles = np.concatenate(accepted, axis=0)

    return orient_toward_viewer(vertices, triangles)


def orient_toward_viewer(vertices: NDArray, triangles: NDArray) -> NDArray[np.int64]:
    """Swap the last two corners of triangles whose normal has negative z."""
    tri = np.array(triangles, dtype=np.int64, copy=True).reshape(-1, 3)
    if len(tri) == 0:
        return tri
    v0, v1, v2 = vertices[tri[:, 0]], vertices[tri[:, 1]], vertices[tri[:, 2]]
    e1 = v1 - v0
    e2 = v2 - v0
    nz = e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0]
    flip = nz < 0
    tri[flip] = tri[flip][:, [0, 2, 1]]
    return tri


def filter_face_local(vertices: NDArray, triangles: NDArray) -> NDArray[np.int64]:
    """Keep triangles whose three pairwise distances are all below ``FACE_LOCAL_DISTANCE``."""
    if len(triangles) == 0:
        return np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    lengths = triangle_edge_lengths(vertices, triangles)
    keep = np.all(lengths < FACE_LOCAL_DISTANCE, axis=1)
    dropped = int((~keep).sum())
    if dropped:
        logger.debug("Topology filter dropped %d of %d triangles", dropped, len(triangles))
    return triangles[keep]


# ── UV mapping ───────────────────────────────────────────────────────

def generate_uv_mapping(vertices: NDArray) -> NDArray[np.float64]:
    """Project vertex (x, y) into UV space: ``u = (x + 1) / 2``, ``v = (y + 1) / 2``."""
    uv = (vertices[:, :2] + 1.0) / 2.0
    return np.clip(uv, 0.0, 1.0)
