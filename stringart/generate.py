import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from . import config
from .builder import PathBuilder, Step
from .imaging import load_luminance
from .instructions import write_lines_csv, write_order_txt, write_pdf
from .render import TimelapseRecorder, make_video, render_path, save_png

logger = logging.getLogger(__name__)

RESULT_PNG = "string_art_result.png"
LINES_CSV = "string_art_lines.csv"
INSTR_TXT = "string_art_instructions.txt"
INSTR_PDF = "string_art_instructions.pdf"
TIMELAPSE_MP4 = "string_art_timelapse.mp4"


def generate_string_art(image_path: str, out_dir: str,
                        num_hooks: int = config.NUM_HOOKS,
                        num_strings: int = config.NUM_STRINGS,
                        size: int = config.IMAGE_SIZE,
                        snapshot_every: int = config.SNAPSHOT_EVERY,
                        workers: int = config.SCORE_WORKERS,
                        pdf: bool = True,
                        cancel=None,
                        on_step: Optional[Callable[[Step], None]] = None) -> dict:
    """
    Runs the full pipeline for one image:
      - load, grayscale and resize to a size x size luminance field
      - build the greedy hook path
      - render the simulated result PNG
      - write CSV / TXT (and optionally PDF) threading instructions
      - write an MP4 timelapse when snapshot_every > 0

    Returns dict with the artefact paths, the hook path and run counters.
    Nothing is left on disk if the image cannot be loaded or the path cannot
    be built (including a cancelled run).
    """
    out = Path(out_dir)
    created = not out.exists()
    field = load_luminance(image_path, size)
    builder = PathBuilder(field, num_hooks, num_strings, workers=workers)

    frames_dir = out / "frames"
    recorder = None

    def step_callback(step: Step) -> None:
        if recorder is not None:
            recorder(step)
        if on_step is not None:
            on_step(step)

    try:
        if snapshot_every and snapshot_every > 0:
            recorder = TimelapseRecorder(builder.hooks, size, frames_dir, snapshot_every)
        result = builder.run(on_step=step_callback, cancel=cancel)
    except Exception:
        shutil.rmtree(out if created else frames_dir, ignore_errors=True)
        raise

    outputs = {
        "result_png": save_png(render_path(result.hooks, result.path, size), out / RESULT_PNG),
        "lines_csv": write_lines_csv(result.path, out / LINES_CSV),
        "instr_txt": write_order_txt(result.path, out / INSTR_TXT),
        "path": result.path,
        "hooks_count": num_hooks,
        "strings_count": num_strings,
        "saturated_steps": result.saturated_steps,
    }
    if pdf and result.chords:
        outputs["instr_pdf"] = write_pdf(result.path, out / INSTR_PDF)
    if recorder is not None:
        if (num_strings % snapshot_every) != 0:
            recorder.save_frame(num_strings)  # final state
        outputs["timelapse_mp4"] = make_video(recorder.frames, out / TIMELAPSE_MP4)

    logger.info("Wrote %d string path for %s to %s", num_strings, image_path, out)
    return outputs
