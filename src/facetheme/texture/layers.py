"""Reusable texture layer kernels.

Working images are float ``(H, W, 3)`` arrays on the 0-255 scale; they are
converted to :class:`TextureData` only once a layer stack is finished.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from facetheme.texture.data import StrokeData, TextureData


def solid_layer(field: NDArray, base_rgb, gain_rgb) -> NDArray[np.float64]:
    """``base + field * gain`` per channel, for a scalar *field* ``(H, W)``."""
    base = np.asarray(base_rgb, dtype=np.float64)
    gain = np.asarray(gain_rgb, dtype=np.float64)
    return base + np.asarray(field, dtype=np.float64)[..., np.newaxis] * gain


def shift_where(image: NDArray, mask: NDArray, amount) -> NDArray[np.float64]:
    """Add *amount* (per-channel, optionally per-pixel) where *mask* holds.

    Negative amounts darken.  The result is clamped to [0, 255].
    """
    out = np.array(image, dtype=np.float64, copy=True)
    amount = np.asarray(amount, dtype=np.float64)
    if amount.ndim == 1:
        amount = np.broadcast_to(amount, out.shape)
    elif amount.ndim == 2:
        amount = amount[..., np.newaxis]
    delta = np.where(mask[..., np.newaxis], amount, 0.0)
    return np.clip(out + delta, 0.0, 255.0)


def stroke_pixels(stroke: StrokeData, width: int, height: int) -> tuple[NDArray, NDArray]:
    """Unique in-bounds texels ``(xs, ys)`` covered by *stroke*.

    The stroke is a straight line of ``ceil(length)`` samples from its
    start point, thickened perpendicular to its direction to
    ``round(width)`` texels (at least one).
    """
    steps = np.arange(int(math.ceil(stroke.length)), dtype=np.float64)
    thickness = max(1, int(round(stroke.width)))
    offsets = np.arange(thickness, dtype=np.float64) - (thickness - 1) / 2.0
    dx, dy = math.cos(stroke.angle), math.sin(stroke.angle)

    px = math.floor(stroke.x) + dx * steps[:, np.newaxis] - dy * offsets[np.newaxis, :]
    py = math.floor(stroke.y) + dy * steps[:, np.newaxis] + dx * offsets[np.newaxis, :]
    xs = np.floor(px).astype(np.int64).ravel()
    ys = np.floor(py).astype(np.int64).ravel()
    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    flat = np.unique(ys[inside] * width + xs[inside])
    return flat % width, flat // width


def apply_strokes(image: NDArray, strokes: list[StrokeData], channel_weights, scale: float) -> NDArray:
    """Shift texels under each stroke by ``scale * depth * (1 - age/2) * weight``.

    A negative *scale* carves (darkens), a positive one inlays (brightens).
    """
    out = np.array(image, dtype=np.float64, copy=True)
    h, w = out.shape[:2]
    weights = np.asarray(channel_weights, dtype=np.float64)
    for stroke in strokes:
        xs, ys = stroke_pixels(stroke, w, h)
        strength = stroke.depth * (1.0 - stroke.age * 0.5) * scale
        out[ys, xs] = np.clip(out[ys, xs] + strength * weights, 0.0, 255.0)
    return out


def random_strokes(
    rng: np.random.Generator,
    count: int,
    width: int,
    height: int,
    kinds: tuple[str, ...],
    length_range: tuple[float, float],
    width_range: tuple[float, float],
    depth_range: tuple[float, float] = (0.3, 1.0),
) -> list[StrokeData]:
    """Draw *count* strokes from *rng*; placement is uniform over the texture."""
    strokes = []
    for _ in range(max(0, int(count))):
        strokes.append(StrokeData(
            kind=str(kinds[int(rng.integers(len(kinds)))]),
            x=float(rng.uniform(0.0, width)),
            y=float(rng.uniform(0.0, height)),
            length=float(rng.uniform(*length_range)),
            width=float(rng.uniform(*width_range)),
            depth=float(rng.uniform(*depth_range)),
            age=float(rng.uniform(0.0, 1.0)),
            angle=float(rng.uniform(0.0, 2.0 * math.pi)),
        ))
    return strokes


def flow_map(flow_x: NDArray, flow_y: NDArray) -> TextureData:
    """Encode a 2D direction field in [-1, 1] into R/G; B is fixed at 128."""
    h, w = np.shape(flow_x)
    rgb = np.empty((h, w, 3), dtype=np.float64)
    rgb[..., 0] = np.floor((np.asarray(flow_x) + 1.0) * 127.5)
    rgb[..., 1] = np.floor((np.asarray(flow_y) + 1.0) * 127.5)
    rgb[..., 2] = 128.0
    return TextureData.from_float(rgb)


def normal_map(tilt_x: NDArray, tilt_y: NDArray, amplitude: float, z: float) -> TextureData:
    """Tangent-space normal map from two independent tilt fields in [-1, 1]."""
    h, w = np.shape(tilt_x)
    rgb = np.empty((h, w, 3), dtype=np.float64)
    rgb[..., 0] = np.floor((np.asarray(tilt_x) * amplitude + 0.5) * 255.0)
    rgb[..., 1] = np.floor((np.asarray(tilt_y) * amplitude + 0.5) * 255.0)
    rgb[..., 2] = math.floor(z * 255.0)
    return TextureData.from_float(rgb)


def specular_map(field: NDArray, scale: float, offset: float) -> TextureData:
    """Grey specular map ``field * scale + offset`` replicated across RGB."""
    value = np.floor(np.clip(np.asarray(field) * scale + offset, 0.0, 1.0) * 255.0)
    return TextureData.from_float(np.repeat(value[..., np.newaxis], 3, axis=2))
