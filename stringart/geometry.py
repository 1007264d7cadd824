from typing import List, NamedTuple, Tuple

import numpy as np

from .errors import InvalidConfiguration


class Point(NamedTuple):
    x: int
    y: int


class Hook(NamedTuple):
    index: int
    x: int
    y: int

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


def hooks(count: int, center: Tuple[int, int], radius: int) -> List[Hook]:
    """
    Evenly spaced hooks on a circle. Hook i sits at angle 2*pi*i/count from
    the positive x-axis (clockwise on screen, since y grows downwards), with
    coordinates rounded to the nearest pixel.
    """
    if count <= 0:
        raise InvalidConfiguration(f"hook count must be positive, got {count}")
    if radius < 0:
        raise InvalidConfiguration(f"radius must not be negative, got {radius}")

    cx, cy = center
    angles = np.linspace(0, 2 * np.pi, count, endpoint=False)
    xs = np.rint(cx + radius * np.cos(angles)).astype(int)
    ys = np.rint(cy + radius * np.sin(angles)).astype(int)
    return [Hook(i, int(x), int(y)) for i, (x, y) in enumerate(zip(xs, ys))]


def circle_layout(size: int) -> Tuple[Point, int]:
    # largest circle whose rounded hooks stay inside a size x size field
    if size <= 0:
        raise InvalidConfiguration(f"field size must be positive, got {size}")
    return Point(size // 2, size // 2), (size - 1) // 2
