import logging
from pathlib import Path
from typing import List, Optional, Sequence

import imageio.v2 as imageio
import matplotlib.pyplot as plt
import numpy as np
from skimage import draw

from .builder import Step
from .geometry import Hook

logger = logging.getLogger(__name__)

FRAME_PREFIX = "frame_"


def blank_canvas(size: int) -> np.ndarray:
    return np.ones((size, size), dtype=np.float64)  # white canvas


def draw_chord(canvas: np.ndarray, a: Hook, b: Hook, antialias: bool = True) -> None:
    """Draws one black chord onto a float canvas (1.0 is white), in place."""
    if antialias:
        rr, cc, val = draw.line_aa(a.y, a.x, b.y, b.x)
        h, w = canvas.shape
        keep = (rr >= 0) & (rr < h) & (cc >= 0) & (cc < w)
        rr, cc, val = rr[keep], cc[keep], val[keep]
        canvas[rr, cc] = np.minimum(canvas[rr, cc], 1.0 - val)
    else:
        rr, cc = draw.line(a.y, a.x, b.y, b.x)
        canvas[rr, cc] = 0.0


def render_path(
    hooks: Sequence[Hook],
    path: Sequence[int],
    size: int,
    antialias: bool = True,
) -> np.ndarray:
    """Simulated result: every consecutive pair of hooks in `path` as a chord."""
    canvas = blank_canvas(size)
    for src, dst in zip(path[:-1], path[1:]):
        draw_chord(canvas, hooks[src], hooks[dst], antialias=antialias)
    return canvas


def to_uint8(canvas: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(canvas * 255), 0, 255).astype(np.uint8)


def save_png(canvas: np.ndarray, png_path, dpi: int = 300) -> str:
    Path(png_path).parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(8, 8))
    plt.imshow(canvas, cmap="gray", vmin=0, vmax=1)
    plt.axis("off")
    plt.tight_layout(pad=0)
    plt.savefig(png_path, dpi=dpi, bbox_inches="tight", pad_inches=0)
    plt.close()
    return str(png_path)


class TimelapseRecorder:
    """
    Step callback for PathBuilder.run(): draws each chord as it is chosen and
    writes a frame every `snapshot_every` strings. Frames are assembled into
    a video afterwards with make_video().
    """

    def __init__(self, hooks: Sequence[Hook], size: int, frames_dir, snapshot_every: int = 25):
        self.hooks = hooks
        self.canvas = blank_canvas(size)
        self.frames_dir = Path(frames_dir)
        self.snapshot_every = snapshot_every
        self.frames: List[str] = []
        if snapshot_every and snapshot_every > 0:
            self.frames_dir.mkdir(parents=True, exist_ok=True)
            self.save_frame(0)  # initial blank

    def save_frame(self, idx: int) -> str:
        fname = self.frames_dir / f"{FRAME_PREFIX}{idx:05d}.png"
        imageio.imwrite(fname, to_uint8(self.canvas))
        self.frames.append(str(fname))
        return str(fname)

    def __call__(self, step: Step) -> None:
        draw_chord(self.canvas, self.hooks[step.source], self.hooks[step.target])
        if self.snapshot_every and ((step.index + 1) % self.snapshot_every == 0):
            self.save_frame(step.index + 1)


def make_video(frames: Sequence[str], out_path, fps: int = 30) -> Optional[str]:
    """Writes frames to an MP4 (via ffmpeg) or, for a .gif path, an animated GIF."""
    if not frames:
        return None

    out_path = str(out_path)
    if out_path.lower().endswith(".gif"):
        imageio.mimsave(out_path, [imageio.imread(f) for f in frames], duration=1000 / fps)
        return out_path

    writer = imageio.get_writer(out_path, format="FFMPEG", fps=fps, codec="libx264", quality=8)
    try:
        for f in frames:
            im = imageio.imread(f)
            if im.ndim == 2:
                im = np.stack([im, im, im], axis=-1)
            writer.append_data(im)
    finally:
        writer.close()
    logger.info("Wrote %d frame timelapse to %s", len(frames), out_path)
    return out_path
