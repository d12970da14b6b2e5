"""Mesh construction, optimisation and quality scoring."""

from facetheme.mesh.builder import FaceMeshBuilder
from facetheme.mesh.optimizer import MeshOptimizer
from facetheme.mesh.quality import MeshQualityMetrics, MeshQualityValidator, MeshValidationResult

__all__ = [
    "FaceMeshBuilder",
    "MeshOptimizer",
    "MeshQualityMetrics",
    "MeshQualityValidator",
    "MeshValidationResult",
]
