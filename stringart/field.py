from typing import Tuple

import numpy as np

from .errors import InvalidConfiguration, OutOfBounds
from .raster import line_pixels

WHITE = 0xFF


def validate_field(field: np.ndarray) -> int:
    """Checks that `field` is a non-empty square uint8 image; returns its side."""
    if not isinstance(field, np.ndarray) or field.ndim != 2:
        raise InvalidConfiguration("luminance field must be a 2-D array")
    h, w = field.shape
    if h == 0 or w == 0:
        raise InvalidConfiguration("luminance field is empty")
    if h != w:
        raise InvalidConfiguration(f"luminance field must be square, got {w}x{h}")
    if field.dtype != np.uint8:
        raise InvalidConfiguration(f"luminance field must be uint8, got {field.dtype}")
    return h


def check_bounds(field: np.ndarray, p: Tuple[int, int]) -> None:
    h, w = field.shape
    if not (0 <= p[0] < w and 0 <= p[1] < h):
        raise OutOfBounds(f"point ({p[0]}, {p[1]}) lies outside the {w}x{h} field")


def _pixels(field: np.ndarray, a, b) -> Tuple[np.ndarray, np.ndarray]:
    check_bounds(field, a)
    check_bounds(field, b)
    # the field is a rectangle, so every pixel between two in-bounds ends is in bounds
    xs, ys = line_pixels(a, b)
    return ys, xs


def score(field: np.ndarray, a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Sum of darkness (255 - luminance) along the chord from a to b."""
    ys, xs = _pixels(field, a, b)
    return int(np.sum(WHITE - field[ys, xs].astype(np.int64)))


def consume(field: np.ndarray, a: Tuple[int, int], b: Tuple[int, int]) -> None:
    """Lightens every pixel on the chord from a to b to white, in place."""
    ys, xs = _pixels(field, a, b)
    field[ys, xs] = WHITE
