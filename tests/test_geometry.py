"""Hook placement on the circle.

Run:
    pytest tests/test_geometry.py -v
"""

import math

import pytest

from stringart.errors import InvalidConfiguration
from stringart.geometry import Hook, Point, circle_layout, hooks


def test_four_hooks_on_small_circle():
    assert hooks(4, (5, 5), 4) == [
        Hook(0, 9, 5),
        Hook(1, 5, 9),
        Hook(2, 1, 5),
        Hook(3, 5, 1),
    ]


def test_hook_zero_at_angle_zero():
    h = hooks(7, (100, 50), 30)[0]
    assert h.point == Point(130, 50)


def test_hooks_lie_on_circle():
    center, radius = (1000, 1000), 999
    result = hooks(200, center, radius)
    assert len(result) == 200
    assert [h.index for h in result] == list(range(200))
    for h in result:
        d = math.hypot(h.x - center[0], h.y - center[1])
        assert abs(d - radius) <= 1


def test_zero_radius_collapses_to_center():
    assert {h.point for h in hooks(5, (3, 3), 0)} == {Point(3, 3)}


@pytest.mark.parametrize("count", [0, -3])
def test_non_positive_count_rejected(count):
    with pytest.raises(InvalidConfiguration):
        hooks(count, (0, 0), 5)


def test_negative_radius_rejected():
    with pytest.raises(InvalidConfiguration):
        hooks(4, (0, 0), -1)


def test_circle_layout():
    assert circle_layout(10) == (Point(5, 5), 4)
    assert circle_layout(11) == (Point(5, 5), 5)
    assert circle_layout(2000) == (Point(1000, 1000), 999)


@pytest.mark.parametrize("size", range(3, 40))
def test_layout_keeps_hooks_inside_field(size):
    center, radius = circle_layout(size)
    for h in hooks(64, center, radius):
        assert 0 <= h.x < size
        assert 0 <= h.y < size


def test_layout_rejects_empty_field():
    with pytest.raises(InvalidConfiguration):
        circle_layout(0)
