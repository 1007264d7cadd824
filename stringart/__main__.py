"""Generate a string art hook sequence from an image.

Usage::

    python -m stringart image.png --out result/ --hooks 200 --strings 1500
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import config
from .errors import StringArtError
from .generate import generate_string_art

logger = logging.getLogger("stringart")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stringart",
        description="Greedy string art: image in, ordered hook sequence out.",
    )
    parser.add_argument("image", help="Input image (ideally square)")
    parser.add_argument("--out", default="result", help="Output directory (default: %(default)s)")
    parser.add_argument("--hooks", type=int, default=config.NUM_HOOKS,
                        help="Number of hooks on the circle (default: %(default)s)")
    parser.add_argument("--strings", type=int, default=config.NUM_STRINGS,
                        help="Number of strings to lay (default: %(default)s)")
    parser.add_argument("--size", type=int, default=config.IMAGE_SIZE,
                        help="Working field side in pixels, one string wide (default: %(default)s)")
    parser.add_argument("--snapshot-every", type=int, default=0,
                        help="Write a timelapse frame every N strings, 0 to skip the video")
    parser.add_argument("--workers", type=int, default=config.SCORE_WORKERS,
                        help="Threads used to score candidate hooks (default: %(default)s)")
    parser.add_argument("--no-pdf", action="store_true", help="Skip the PDF instructions")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every string")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging("DEBUG" if args.verbose else None)

    try:
        outputs = generate_string_art(
            args.image, args.out,
            num_hooks=args.hooks,
            num_strings=args.strings,
            size=args.size,
            snapshot_every=args.snapshot_every,
            workers=args.workers,
            pdf=not args.no_pdf,
        )
    except StringArtError as e:
        logger.error("%s", e)
        return 1

    print(" ".join(str(h) for h in outputs["path"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
