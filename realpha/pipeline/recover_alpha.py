# pipeline/recover_alpha.py
from __future__ import annotations
from pathlib import Path
from typing import Callable, Optional
import logging

from ..models.blend import Blend
from ..models.geometry import ImageGeometry
from ..models.image import Image
from ..services.image_service import ImageService
from ..services.matting_service import MattingService

logger = logging.getLogger(__name__)


def recover_alpha(
    black_path: str | Path,
    white_path: str | Path,
    out_path: str | Path,
    *,
    blend: Blend = Blend.BLACK,
    matting_service: MattingService | None = None,
    image_service: ImageService = ImageService(),
    on_validated: Optional[Callable[[ImageGeometry], None]] = None,
) -> Image:
    """
    For one black/white pair on disk:
        • load both images
        • validate the pair (on_validated gets the shared geometry)
        • recover alpha + foreground
        • write the result to *out_path* as PNG
    Returns the saved Image. Nothing is written if validation fails.
    """
    matting_service = matting_service or MattingService()

    black = image_service.load(black_path)
    white = image_service.load(white_path)
    logger.info(f"Loaded {black.path.name} and {white.path.name}")

    pair = matting_service.validate(black, white)
    if on_validated is not None:
        on_validated(pair.geometry)

    result = image_service.create_image(matting_service.recover(pair, blend), out_path)
    image_service.save(result)
    logger.info(f"Saved {result.path}")
    return result
