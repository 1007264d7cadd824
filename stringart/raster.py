from typing import List, Tuple

import numpy as np
from skimage import draw

from .geometry import Point


def line_pixels(a: Tuple[int, int], b: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
    """
    (xs, ys) of the pixels a straight line from a to b passes through, a
    first and b last.

    The line is always drawn from the smaller endpoint and flipped when
    needed, so a -> b and b -> a cover the same pixels.
    """
    a = Point(int(a[0]), int(a[1]))
    b = Point(int(b[0]), int(b[1]))
    lo, hi = (a, b) if a <= b else (b, a)
    rr, cc = draw.line(lo.y, lo.x, hi.y, hi.x)
    if lo != a:
        rr, cc = rr[::-1], cc[::-1]
    return cc, rr


def rasterize(a: Tuple[int, int], b: Tuple[int, int]) -> List[Point]:
    xs, ys = line_pixels(a, b)
    return [Point(int(x), int(y)) for x, y in zip(xs, ys)]


def line_indices(a: Tuple[int, int], b: Tuple[int, int], width: int) -> np.ndarray:
    """Flat row-major indices of the line from a to b in a field `width` pixels wide."""
    xs, ys = line_pixels(a, b)
    dtype = np.int32 if width * width < 2 ** 31 else np.int64
    return (ys.astype(dtype) * width + xs).astype(dtype)
