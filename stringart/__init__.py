from .builder import PathBuilder, Step, StringArtResult, build_path, select_next
from .errors import (
    BuildCancelled,
    ImageLoadError,
    InvalidConfiguration,
    OutOfBounds,
    StringArtError,
)
from .field import consume, score
from .geometry import Hook, Point, circle_layout, hooks
from .raster import line_indices, rasterize

__all__ = [
    "BuildCancelled",
    "Hook",
    "ImageLoadError",
    "InvalidConfiguration",
    "OutOfBounds",
    "PathBuilder",
    "Point",
    "Step",
    "StringArtError",
    "StringArtResult",
    "build_path",
    "circle_layout",
    "consume",
    "hooks",
    "line_indices",
    "rasterize",
    "score",
    "select_next",
]
