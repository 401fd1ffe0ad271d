import os
import sys
import time
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from .. import __version__
from ..models.blend import Blend
from ..models.errors import ValidationError
from ..models.geometry import ImageGeometry
from ..pipeline.recover_alpha import recover_alpha
from ..services.matting_service import MattingService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="realpha",
        description="Derives an image with alpha channel from two alpha-less images",
    )
    ap.add_argument("-b", "--blend", type=Blend.parse, default=None,
                    metavar="{black,white,mix}",
                    help="which image to take the color values from "
                         "(default: REALPHA_BLEND or black; mix averages both)")
    ap.add_argument("-w", "--workers", type=int, default=None,
                    help="worker threads (default: REALPHA_WORKERS or CPU count)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("black", type=Path, help="an image with a solid black background")
    ap.add_argument("white", type=Path, help="an image with a solid white background")
    ap.add_argument("out", type=Path, help="the output image (PNG)")
    return ap


def _log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {name!r}")
    return level


def _announce(geometry: ImageGeometry) -> None:
    print(f"Generating {geometry.color_name} output at {geometry.width}×{geometry.height} "
          f"with {geometry.bit_depth} bits per channel…")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # Environment settings are only consulted where no flag overrides them.
    try:
        level = _log_level(args.verbose)
        blend = args.blend if args.blend is not None else Blend.parse(os.getenv("REALPHA_BLEND") or "black")
        matting_service = MattingService(workers=args.workers)
    except ValueError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    print("Loading images…")
    start = time.perf_counter()

    try:
        recover_alpha(args.black, args.white, args.out, blend=blend,
                      matting_service=matting_service, on_validated=_announce)
    except (OSError, ValidationError) as err:
        logger.error(f"{err}")
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(f"{args.out.name} saved in {time.perf_counter() - start:.02f}s!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
