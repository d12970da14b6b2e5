"""Tests for texture layer kernels."""

import math

import numpy as np

from facetheme.texture.data import StrokeData
from facetheme.texture.layers import (
    apply_strokes, flow_map, normal_map, random_strokes, shift_where,
    solid_layer, specular_map, stroke_pixels,
)


def _stroke(x=10.0, y=10.0, length=5.0, width=1.0, angle=0.0, depth=1.0, age=0.0):
    return StrokeData("cut", x, y, length, width, depth, age, angle)


def test_solid_layer():
    out = solid_layer(np.array([[0.0, 1.0]]), (10, 20, 30), (1, 2, 3))
    np.testing.assert_array_equal(out[0, 1], [11, 22, 33])


def test_shift_where_clamps():
    image = np.full((2, 2, 3), 250.0)
    mask = np.array([[True, False], [False, False]])
    out = shift_where(image, mask, (10.0, -300.0, 0.0))
    np.testing.assert_array_equal(out[0, 0], [255, 0, 250])
    np.testing.assert_array_equal(out[1, 1], [250, 250, 250])


def test_stroke_pixels_line():
    xs, ys = stroke_pixels(_stroke(), 64, 64)
    assert sorted(xs.tolist()) == [10, 11, 12, 13, 14]
    assert set(ys.tolist()) == {10}


def test_stroke_pixels_thickness():
    xs, ys = stroke_pixels(_stroke(width=3.0), 64, 64)
    assert len(xs) == 15
    assert set(ys.tolist()) == {9, 10, 11}


def test_stroke_pixels_clipped():
    xs, _ = stroke_pixels(_stroke(x=-100.0), 64, 64)
    assert len(xs) == 0
    xs, _ = stroke_pixels(_stroke(x=62.0), 64, 64)
    assert sorted(xs.tolist()) == [62, 63]


def test_apply_strokes_carves():
    image = np.full((32, 32, 3), 200.0)
    out = apply_strokes(image, [_stroke()], (1.0, 0.8, 0.6), scale=-100.0)
    np.testing.assert_array_almost_equal(out[10, 10], [100, 120, 140])
    np.testing.assert_array_equal(out[0, 0], [200, 200, 200])
    assert image[10, 10, 0] == 200.0


def test_random_strokes_are_seeded():
    kwargs = dict(count=4, width=64, height=64, kinds=("a", "b"),
                  length_range=(5.0, 10.0), width_range=(1.0, 2.0))
    a = random_strokes(np.random.default_rng(1), **kwargs)
    b = random_strokes(np.random.default_rng(1), **kwargs)
    assert a == b
    assert len(a) == 4
    for s in a:
        assert s.kind in ("a", "b")
        assert 0.0 <= s.x < 64 and 5.0 <= s.length <= 10.0
        assert 0.0 <= s.angle < 2 * math.pi


def test_no_strokes_for_zero_count():
    assert random_strokes(np.random.default_rng(1), 0, 8, 8, ("a",), (1, 2), (1, 2)) == []


def test_flow_map_encoding():
    tex = flow_map(np.array([[-1.0, 1.0]]), np.array([[0.0, 0.0]]))
    np.testing.assert_array_equal(tex.data[0, :, 0], [0, 255])
    np.testing.assert_array_equal(tex.data[0, :, 1], [127, 127])
    assert (tex.data[..., 2] == 128).all()


def test_normal_map_flat():
    tex = normal_map(np.zeros((2, 2)), np.zeros((2, 2)), amplitude=0.5, z=0.5)
    np.testing.assert_array_equal(tex.data[0, 0], [127, 127, 127, 255])


def test_specular_map():
    tex = specular_map(np.array([[0.0, 1.0, -5.0]]), scale=0.3, offset=0.1)
    np.testing.assert_array_equal(tex.data[0, :, 0], [25, 102, 0])
    np.testing.assert_array_equal(tex.data[0, :, 0], tex.data[0, :, 2])
