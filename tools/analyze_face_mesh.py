"""Analyze the synthetic face mesh at every resolution.

Builds the reference face, then reports connected components, what each
optimizer pass removed and the validator's scores and warnings.  Useful
when tuning the triangulation thresholds.
"""

import sys
sys.path.insert(0, "src")
sys.path.insert(0, ".")

import numpy as np

from facetheme.core.mesh import FaceMesh, face_frame
from facetheme.core.options import MeshGenerationOptions, Resolution
from facetheme.mesh.builder import FaceMeshBuilder
from facetheme.mesh.optimizer import drop_degenerate_triangles, drop_sliver_triangles, weld_vertices
from facetheme.mesh.quality import MeshQualityValidator
from tools.preview_theme import synthetic_landmarks


def find_connected_components(triangles: np.ndarray, vert_count: int) -> list[np.ndarray]:
    """Find connected components using triangle adjacency (union-find).

    Vertices touched by no triangle form singleton components.
    """
    parent = np.arange(vert_count, dtype=np.int64)

    def find(x):
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for a, b, c in np.asarray(triangles, dtype=np.int64).reshape(-1, 3):
        ra = find(a)
        for other in (b, c):
            ro = find(other)
            if ro != ra:
                parent[ro] = ra

    roots = np.array([find(i) for i in range(vert_count)], dtype=np.int64)
    components = [np.where(roots == r)[0] for r in np.unique(roots)]

    # Sort by size descending
    components.sort(key=len, reverse=True)
    return components


def region_of(xc: float, yc: float) -> str:
    """Rough facial region of a face-frame point."""
    if yc > 0.1:
        return "brow/eyes"
    if yc < -0.5:
        return "chin"
    if abs(xc) > 0.5:
        return "jaw"
    return "nose/mouth"


def pass_report(mesh: FaceMesh) -> list[tuple[str, int, int]]:
    """(pass name, vertices removed, triangles removed) for each optimizer pass."""
    rows = []
    current = mesh
    for name, step in (
        ("weld", weld_vertices),
        ("degenerate", drop_degenerate_triangles),
        ("sliver", drop_sliver_triangles),
    ):
        result = step(current)
        rows.append((
            name,
            current.vertex_count - result.vertex_count,
            current.triangle_count - result.triangle_count,
        ))
        current = result
    return rows


def analyze(resolution: Resolution) -> dict:
    mesh = FaceMeshBuilder().build(
        synthetic_landmarks(), MeshGenerationOptions(resolution=resolution))
    validation = MeshQualityValidator().validate(mesh)
    return {
        "mesh": mesh,
        "components": find_connected_components(mesh.triangles, mesh.vertex_count),
        "passes": pass_report(mesh),
        "validation": validation,
    }


def main():
    for resolution in Resolution:
        report = analyze(resolution)
        mesh = report["mesh"]
        V, T = mesh.vertex_count, mesh.triangle_count
        print(f"\n=== {resolution.value} resolution: {V} vertices, {T} triangles ===")

        components = report["components"]
        print(f"Found {len(components)} connected components")
        xc, yc = face_frame(mesh)
        print(f"{'Comp':>5s} {'Verts':>6s} {'%':>6s} {'Center':>16s} {'Region':>12s}")
        print("-" * 50)
        for i, comp in enumerate(components[:10]):
            cx, cy = xc[comp].mean(), yc[comp].mean()
            pct = len(comp) / V * 100
            print(f"{i:5d} {len(comp):6d} {pct:5.1f}% ({cx:6.2f},{cy:6.2f}) {region_of(cx, cy):>12s}")

        print("\nOptimizer passes:")
        for name, dv, dt in report["passes"]:
            print(f"  {name:<11s} -{dv} vertices, -{dt} triangles")

        validation = report["validation"]
        print(f"\nValid: {validation.is_valid}")
        for key, value in validation.quality_metrics.scores().items():
            print(f"  {key:<17s} {value:.3f}")
        for msg in validation.errors:
            print(f"  ERROR   {msg}")
        for msg in validation.warnings:
            print(f"  WARNING {msg}")

    print("\nDone.")


if __name__ == "__main__":
    main()
