"""Boundary to the external style-inference engine.

The engine receives a rendered mesh tensor and a style vector and answers
with a mapping that must contain ``styled_image`` of the same shape as the
input tensor.  Anything else is reported as :class:`ThemeStyleError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol

import numpy as np
from numpy.typing import NDArray

from facetheme.constants import STYLE_VECTOR_LENGTH, TENSOR_CHANNELS, TENSOR_SIZE
from facetheme.core.errors import ThemeStyleError

logger = logging.getLogger(__name__)

IMAGE_TENSOR_SHAPE = (1, TENSOR_CHANNELS, TENSOR_SIZE, TENSOR_SIZE)
STYLE_VECTOR_SHAPE = (1, STYLE_VECTOR_LENGTH)
STYLED_IMAGE_KEY = "styled_image"


@dataclass(eq=False)
class InferenceRequest:
    """Inputs for one inference call (NCHW image, batch-of-one style vector)."""
    image_tensor: NDArray[np.float32]
    style_vector: NDArray[np.float32]

    def __post_init__(self):
        self.image_tensor = np.asarray(self.image_tensor, dtype=np.float32)
        self.style_vector = np.asarray(self.style_vector, dtype=np.float32).reshape(STYLE_VECTOR_SHAPE)
        if self.image_tensor.shape != IMAGE_TENSOR_SHAPE:
            raise ValueError(
                f"image_tensor must have shape {IMAGE_TENSOR_SHAPE}, got {self.image_tensor.shape}")


class InferenceEngine(Protocol):
    """Anything that can turn an :class:`InferenceRequest` into a styled image."""

    def run(self, theme_id: str, request: InferenceRequest) -> Mapping[str, NDArray]:
        ...


def styled_image_from(result: Mapping[str, NDArray]) -> NDArray[np.float32]:
    """Pull ``styled_image`` out of an engine result and check its shape."""
    if result is None or STYLED_IMAGE_KEY not in result:
        raise ThemeStyleError(f"Inference result is missing '{STYLED_IMAGE_KEY}'")
    image = np.asarray(result[STYLED_IMAGE_KEY], dtype=np.float32)
    if image.shape != IMAGE_TENSOR_SHAPE:
        raise ThemeStyleError(
            f"Inference result '{STYLED_IMAGE_KEY}' has shape {image.shape}, "
            f"expected {IMAGE_TENSOR_SHAPE}"
        )
    return image


def channel_means(image: NDArray) -> tuple[float, float, float]:
    """Mean of each colour plane of an NCHW tensor."""
    means = np.asarray(image, dtype=np.float64).mean(axis=(0, 2, 3))
    return float(means[0]), float(means[1]), float(means[2])


class StaticInferenceEngine:
    """Offline engine returning a uniform image of a fixed colour.

    Useful for previews and tests where no model is available; it still
    checks the request so shape bugs surface without a real model.
    """

    def __init__(self, rgb: tuple[float, float, float] = (0.6, 0.5, 0.4)):
        self.rgb = tuple(float(c) for c in rgb)

    def run(self, theme_id: str, request: InferenceRequest) -> Mapping[str, NDArray]:
        if request.image_tensor.shape != IMAGE_TENSOR_SHAPE:
            raise ValueError(f"Unexpected image tensor shape {request.image_tensor.shape}")
        if request.style_vector.shape != STYLE_VECTOR_SHAPE:
            raise ValueError(f"Unexpected style vector shape {request.style_vector.shape}")
        image = np.empty(IMAGE_TENSOR_SHAPE, dtype=np.float32)
        for c, value in enumerate(self.rgb):
            image[0, c] = value
        logger.debug("Static inference for theme %s: rgb=%s", theme_id, self.rgb)
        return {STYLED_IMAGE_KEY: image}
