import logging
import os
import sys


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def pixels_for(circle_diameter_mm: float, string_diameter_mm: float) -> int:
    # one pixel per string width
    return int(circle_diameter_mm / string_diameter_mm)


# Physical board: 600 mm circle wound with 0.3 mm string
CIRCLE_DIAMETER_MM = 600
STRING_DIAMETER_MM = 0.3

# Parameters for the string art generator
NUM_HOOKS = _int_env("NUM_HOOKS", 200)
NUM_STRINGS = _int_env("NUM_STRINGS", 1500)
IMAGE_SIZE = _int_env("IMAGE_SIZE", pixels_for(CIRCLE_DIAMETER_MM, STRING_DIAMETER_MM))
SNAPSHOT_EVERY = _int_env("SNAPSHOT_EVERY", 25)  # 0 disables the timelapse
SCORE_WORKERS = _int_env("SCORE_WORKERS", 1)

PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL")  # e.g. https://string-art-api.onrender.com
JOBS_ROOT = os.getenv("JOBS_ROOT", "jobs")
LOG_LEVEL = os.getenv("STRING_ART_LOG_LEVEL", "INFO")


def configure_logging(level=None) -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
