"""Shared test fixtures."""

import os

os.environ.setdefault("MPLBACKEND", "Agg")

import imageio.v2 as imageio
import numpy as np
import pytest


def white_field(size: int) -> np.ndarray:
    return np.full((size, size), 255, dtype=np.uint8)


@pytest.fixture
def random_field():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(48, 48), dtype=np.uint8)


@pytest.fixture
def single_dark_pixel_field():
    # dark pixel on the chord between hook 0 (9, 5) and hook 1 (5, 9)
    field = white_field(10)
    field[7, 7] = 0
    return field


@pytest.fixture
def cross_image(tmp_path):
    """A 40x40 RGB PNG: white with a black X."""
    img = np.full((40, 40, 3), 255, dtype=np.uint8)
    idx = np.arange(40)
    img[idx, idx] = 0
    img[idx, 39 - idx] = 0
    path = tmp_path / "cross.png"
    imageio.imwrite(path, img)
    return str(path)
