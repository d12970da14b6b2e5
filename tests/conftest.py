"""Shared fixtures: the 30-point reference face and inference engines."""

import numpy as np
import pytest

from facetheme.core.options import ProcessingOptions
from facetheme.mesh.builder import FaceMeshBuilder
from facetheme.mesh.optimizer import MeshOptimizer
from facetheme.styling.inference import StaticInferenceEngine
from tools.preview_theme import synthetic_landmarks


@pytest.fixture
def landmarks():
    return synthetic_landmarks()


@pytest.fixture
def options():
    return ProcessingOptions(quality="balanced", style_intensity=0.8, preserve_identity=0.9)


@pytest.fixture
def engine():
    return StaticInferenceEngine((0.6, 0.5, 0.4))


@pytest.fixture(scope="module")
def built_mesh():
    return FaceMeshBuilder().build(synthetic_landmarks())


@pytest.fixture(scope="module")
def optimized_mesh(built_mesh):
    return MeshOptimizer().optimize(built_mesh)


class RecordingEngine:
    """Engine stub that records requests and returns a fixed result."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def run(self, theme_id, request):
        self.calls.append((theme_id, request))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def recording_engine():
    return RecordingEngine


@pytest.fixture
def make_image():
    return uniform_image


def uniform_image(rgb, size=512):
    image = np.empty((1, 3, size, size), dtype=np.float32)
    for c, value in enumerate(rgb):
        image[0, c] = value
    return image
