import os
import logging
from typing import Optional

import numpy as np
from dotenv import load_dotenv

from ..models.blend import Blend
from ..models.geometry import ValidatedPair
from ..models.image import Image
from .image_transform import DEFAULT_BAND_PIXELS, DEFAULT_MIN_PARALLEL_PIXELS, transform
from .validation_service import ValidationService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    """Integer setting from the environment; unset or empty means *default*."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class MattingService:
    """
    Business-level entry point for difference matting.

    • Validates the pair once, up front.
    • Runs the parallel transform with the configured worker settings.

    Raises ValueError on construction when an environment setting is not
    an integer.
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        min_parallel_pixels: Optional[int] = None,
        band_pixels: Optional[int] = None,
    ):
        if workers is None:
            workers = _env_int("REALPHA_WORKERS", os.cpu_count() or 1)
        if min_parallel_pixels is None:
            min_parallel_pixels = _env_int("REALPHA_MIN_PARALLEL_PIXELS", DEFAULT_MIN_PARALLEL_PIXELS)
        if band_pixels is None:
            band_pixels = _env_int("REALPHA_BAND_PIXELS", DEFAULT_BAND_PIXELS)
        self.workers = max(1, workers)
        self.min_parallel_pixels = min_parallel_pixels
        self.band_pixels = max(1, band_pixels)
        self.validation_service = ValidationService()

    def validate(self, black: Image, white: Image) -> ValidatedPair:
        """Raises StructuralMismatch / UnsupportedLayout on a bad pair."""
        return self.validation_service.validate(black.pixels, white.pixels)

    def recover(self, pair: ValidatedPair, blend: Blend = Blend.BLACK) -> np.ndarray:
        geometry = pair.geometry
        logger.info(
            f"Recovering alpha for {geometry.width}x{geometry.height} {geometry.color_name} "
            f"({geometry.bit_depth}-bit, blend={Blend(blend).value}, workers={self.workers})"
        )
        return transform(pair, blend, workers=self.workers,
                         min_parallel_pixels=self.min_parallel_pixels,
                         band_pixels=self.band_pixels)
