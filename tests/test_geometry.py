import pytest
from PIL import Image

from signpack.geometry import (
    dash_polyline,
    ring_mask,
    rounded_rect_mask,
    rounded_rect_points,
    stroke_rounded_rect,
)


def test_square_rect_points():
    pts = rounded_rect_points(0, 0, 10, 5, 0)
    assert pts == [(0, 0), (10, 0), (10, 5), (0, 5), (0, 0)]


def test_radius_is_capped_to_half_the_short_side():
    pts = rounded_rect_points(0, 0, 100, 20, 50)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    assert min(xs) >= 0 and max(xs) <= 100
    assert min(ys) >= 0 and max(ys) <= 20
    # top edge starts after the capped radius of 10
    assert pts[0] == (10, 0)


def test_dash_pattern_splits_runs():
    runs = dash_polyline([(0, 0), (10, 0)], [2, 3])
    spans = [(run[0][0], run[-1][0]) for run in runs]
    assert spans == [(0, pytest.approx(2)), (pytest.approx(5), pytest.approx(7))]


def test_empty_dash_returns_whole_line():
    pts = [(0, 0), (5, 5), (10, 0)]
    assert dash_polyline(pts, []) == [pts]


def test_rounded_mask_clears_corners():
    mask = rounded_rect_mask((100, 40), 15)
    assert mask.getpixel((0, 0)) == 0
    assert mask.getpixel((50, 20)) == 255


def test_zero_radius_mask_is_full():
    mask = rounded_rect_mask((10, 10), 0)
    assert mask.getextrema() == (255, 255)


def test_ring_mask_is_hollow():
    mask = ring_mask((100, 50), 5, 5, 90, 40, 0, 4)
    assert mask.getpixel((5, 25)) > 200
    assert mask.getpixel((50, 25)) == 0
    # square corner stays filled (miter join)
    assert mask.getpixel((4, 4)) > 200


def test_stroke_rounded_rect_solid():
    layer = Image.new("RGBA", (100, 50), (0, 0, 0, 0))
    stroke_rounded_rect(layer, 2, 2, 96, 46, 0, (255, 0, 0, 255), 4)
    r, g, b, a = layer.getpixel((2, 25))
    assert r > 240 and g < 15 and a > 240
    assert layer.getpixel((50, 25))[3] == 0
