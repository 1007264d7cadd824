"""Line rasterization.

Run:
    pytest tests/test_raster.py -v
"""

import itertools

import numpy as np

from stringart.geometry import Point
from stringart.raster import line_indices, line_pixels, rasterize

COORDS = range(-4, 5)
POINTS = [(x, y) for x in COORDS for y in COORDS]


def test_single_point():
    assert rasterize((3, 4), (3, 4)) == [Point(3, 4)]


def test_horizontal_and_vertical():
    assert rasterize((0, 2), (3, 2)) == [Point(0, 2), Point(1, 2), Point(2, 2), Point(3, 2)]
    assert rasterize((1, 3), (1, 0)) == [Point(1, 3), Point(1, 2), Point(1, 1), Point(1, 0)]


def test_diagonal():
    assert rasterize((5, 9), (9, 5)) == [Point(5, 9), Point(6, 8), Point(7, 7), Point(8, 6), Point(9, 5)]


def test_shallow_line_same_pixels_both_ways():
    forward = rasterize((0, 0), (2, 1))
    backward = rasterize((2, 1), (0, 0))
    assert forward == [Point(0, 0), Point(1, 1), Point(2, 1)]
    assert backward == forward[::-1]


def test_lines_are_connected_and_gap_free():
    for a, b in itertools.product(POINTS, repeat=2):
        pts = rasterize(a, b)
        assert pts[0] == a
        assert pts[-1] == b
        assert len(pts) == max(abs(b[0] - a[0]), abs(b[1] - a[1])) + 1
        assert len(set(pts)) == len(pts)
        for p, q in zip(pts, pts[1:]):
            assert max(abs(q.x - p.x), abs(q.y - p.y)) == 1


def test_lines_are_symmetric():
    for a, b in itertools.combinations(POINTS, 2):
        assert set(rasterize(a, b)) == set(rasterize(b, a))


def test_line_indices_match_points():
    width = 12
    idx = line_indices((1, 2), (10, 7), width)
    expected = [p.y * width + p.x for p in rasterize((1, 2), (10, 7))]
    assert idx.tolist() == expected
    assert idx.dtype == np.int32


def test_line_pixels_run_from_a_to_b():
    xs, ys = line_pixels((7, 1), (2, 9))
    assert (xs[0], ys[0]) == (7, 1)
    assert (xs[-1], ys[-1]) == (2, 9)
    assert list(zip(xs.tolist(), ys.tolist())) == [tuple(p) for p in rasterize((7, 1), (2, 9))]
