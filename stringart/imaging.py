import logging

import numpy as np
import requests
from skimage import color, io, transform, util

from .errors import ImageLoadError, InvalidConfiguration

logger = logging.getLogger(__name__)


def to_luminance(img: np.ndarray, size: int) -> np.ndarray:
    """
    Turns a decoded image (gray, gray+alpha, RGB or RGBA, any dtype) into a size x size
    uint8 luminance field: alpha is composited on white, the centre square is
    cropped and the result resized.
    """
    if size <= 0:
        raise InvalidConfiguration(f"image size must be positive, got {size}")

    img = util.img_as_float(img)
    if img.ndim == 3:
        if img.shape[2] == 4:  # RGBA
            img = color.rgba2rgb(img)
        elif img.shape[2] == 2:  # gray + alpha
            alpha = img[..., 1]
            img = img[..., 0] * alpha + (1 - alpha)
        elif img.shape[2] == 1:
            img = img[..., 0]
        if img.ndim == 3:
            img = color.rgb2gray(img)
    if img.ndim != 2 or img.size == 0:
        raise ImageLoadError(f"unsupported image shape {img.shape}")

    h, w = img.shape
    side = min(h, w)
    top, left = (h - side) // 2, (w - side) // 2
    img = img[top:top + side, left:left + side]

    if side != size:
        img = transform.resize(img, (size, size), anti_aliasing=side > size)
    return np.clip(np.rint(img * 255), 0, 255).astype(np.uint8)


def load_luminance(image_path: str, size: int) -> np.ndarray:
    try:
        img = io.imread(image_path)
    except (OSError, ValueError) as e:
        raise ImageLoadError(f"could not open or decode {image_path}: {e}") from e
    logger.debug("Loaded %s with shape %s", image_path, img.shape)
    return to_luminance(img, size)


def fetch_image(url: str, dest_path: str, timeout: float = 30.0) -> str:
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ImageLoadError(f"could not download {url}: {e}") from e

    content_type = resp.headers.get("Content-Type", "")
    if content_type and not content_type.startswith("image/"):
        raise ImageLoadError(f"{url} is not an image (Content-Type {content_type})")

    with open(dest_path, "wb") as out:
        out.write(resp.content)
    logger.info("Downloaded %s (%d bytes) to %s", url, len(resp.content), dest_path)
    return dest_path
