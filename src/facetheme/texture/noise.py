"""Deterministic procedural noise fields.

All functions are vectorised: ``x`` and ``y`` may be scalars or arrays of
any matching shape, and the result has that shape.
"""

import numpy as np
from numpy.typing import NDArray


def texel_grid(width: int, height: int | None = None) -> tuple[NDArray, NDArray]:
    """Float texel coordinates ``(xs, ys)``, each shaped ``(height, width)``."""
    height = width if height is None else height
    ys, xs = np.mgrid[0:height, 0:width]
    return xs.astype(np.float64), ys.astype(np.float64)


def hash_noise(x, y) -> NDArray:
    """Cheap sine hash in [-1, 1).  Uncorrelated between neighbouring texels."""
    a = np.sin(np.asarray(x) * 12.9898 + np.asarray(y) * 78.233) * 43758.5453
    return (a - np.floor(a)) * 2.0 - 1.0


def marble_noise(x, y) -> NDArray:
    """Smooth flowing bands built from a few low-frequency sinusoids."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    n1 = np.sin(x * 0.1) * np.cos(y * 0.1)
    n2 = np.sin(x * 0.05 + y * 0.05) * 0.5
    n3 = np.sin(x * 0.02) * np.cos(y * 0.03) * 0.3
    return (n1 + n2 + n3) * 0.5


def _smoothstep(t):
    return t * t * (3.0 - 2.0 * t)


def value_noise(x, y) -> NDArray:
    """Lattice value noise in [-1, 1]: hashed corners, smoothstep blend."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x0 = np.floor(x)
    y0 = np.floor(y)
    tx = _smoothstep(x - x0)
    ty = _smoothstep(y - y0)
    c00 = hash_noise(x0, y0)
    c10 = hash_noise(x0 + 1.0, y0)
    c01 = hash_noise(x0, y0 + 1.0)
    c11 = hash_noise(x0 + 1.0, y0 + 1.0)
    top = c00 + (c10 - c00) * tx
    bottom = c01 + (c11 - c01) * tx
    return top + (bottom - top) * ty


def fbm(x, y, octaves: int = 4, lacunarity: float = 2.0, gain: float = 0.5) -> NDArray:
    """Fractal sum of :func:`value_noise` octaves, normalised to [-1, 1]."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    total = np.zeros(np.broadcast(x, y).shape)
    amplitude = 1.0
    frequency = 1.0
    norm = 0.0
    for _ in range(octaves):
        total += value_noise(x * frequency, y * frequency) * amplitude
        norm += amplitude
        amplitude *= gain
        frequency *= lacunarity
    return total / norm


def curl_noise(x, y, center: float = 128.0) -> NDArray:
    """Spiral pattern around ``(center, center)``."""
    dx = np.asarray(x, dtype=np.float64) - center
    dy = np.asarray(y, dtype=np.float64) - center
    angle = np.arctan2(dy, dx)
    radius = np.sqrt(dx * dx + dy * dy)
    return np.sin(angle * 3.0 + radius * 0.1) * np.cos(radius * 0.05)


def braid_noise(x, y) -> NDArray:
    """Three interleaved diagonal waves."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    p1 = np.sin(x * 0.2 + y * 0.1)
    p2 = np.sin(x * 0.1 + y * 0.2 + np.pi / 3.0)
    p3 = np.sin(x * 0.15 + y * 0.15 + np.pi * 2.0 / 3.0)
    return (p1 + p2 + p3) / 3.0


def quantize(values, levels: int) -> NDArray:
    """Snap values in [0, 1] onto *levels* flat bands."""
    levels = max(1, int(levels))
    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    return np.minimum(np.floor(v * levels), levels - 1) / max(1, levels - 1)
