"""Typed errors raised by the mesh, styling, texture and lighting stages.

Every stage raises its own subclass of :class:`FaceThemeError`.  Foreign
exceptions are wrapped with ``raise ... from exc`` so the originating cause
stays reachable through ``__cause__`` and the ``cause`` attribute.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INSUFFICIENT_LANDMARKS = "INSUFFICIENT_LANDMARKS"
    LANDMARK_OUT_OF_RANGE = "LANDMARK_OUT_OF_RANGE"
    MESH_GENERATION_FAILED = "MESH_GENERATION_FAILED"
    MESH_OPTIMIZATION_FAILED = "MESH_OPTIMIZATION_FAILED"
    THEME_STYLE_FAILED = "THEME_STYLE_FAILED"
    TEXTURE_SYNTHESIS_FAILED = "TEXTURE_SYNTHESIS_FAILED"
    LIGHTING_COMPOSITION_FAILED = "LIGHTING_COMPOSITION_FAILED"
    THEME_NOT_FOUND = "THEME_NOT_FOUND"


class FaceThemeError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind = ErrorKind.MESH_GENERATION_FAILED

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class MeshGenerationError(FaceThemeError):
    kind = ErrorKind.MESH_GENERATION_FAILED


class InsufficientLandmarksError(MeshGenerationError):
    kind = ErrorKind.INSUFFICIENT_LANDMARKS


class LandmarkOutOfRangeError(MeshGenerationError):
    kind = ErrorKind.LANDMARK_OUT_OF_RANGE


class MeshOptimizationError(FaceThemeError):
    kind = ErrorKind.MESH_OPTIMIZATION_FAILED


class ThemeStyleError(FaceThemeError):
    kind = ErrorKind.THEME_STYLE_FAILED


class TextureSynthesisError(FaceThemeError):
    kind = ErrorKind.TEXTURE_SYNTHESIS_FAILED


class LightingCompositionError(FaceThemeError):
    kind = ErrorKind.LIGHTING_COMPOSITION_FAILED


class ThemeNotFoundError(FaceThemeError, KeyError):
    kind = ErrorKind.THEME_NOT_FOUND

    def __str__(self) -> str:
        return self.message
