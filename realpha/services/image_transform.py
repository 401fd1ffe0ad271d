from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple
import logging
import os
import numpy as np

from ..models.blend import Blend
from ..models.geometry import ValidatedPair
from .recovery_kernel import recover_block

logger = logging.getLogger(__name__)

# Below this many pixels, threading overhead dominates.
DEFAULT_MIN_PARALLEL_PIXELS = 65_536
# Pixels per band; bounds the float64 temporaries each worker holds at once.
DEFAULT_BAND_PIXELS = 262_144


def row_ranges(height: int, bands: int) -> List[Tuple[int, int]]:
    """Split [0, height) into at most `bands` contiguous, disjoint row ranges."""
    if height <= 0:
        return []
    bands = max(1, min(bands, height))
    chunk = (height + bands - 1) // bands
    return [(lo, min(lo + chunk, height)) for lo in range(0, height, chunk)]


def band_ranges(height: int, width: int, workers: int, band_pixels: int) -> List[Tuple[int, int]]:
    """
    Row ranges with at least one band per worker and no band larger than
    `band_pixels` (a band is never smaller than one row).
    """
    rows_per_band = max(1, band_pixels // max(1, width))
    bands = max(workers, -(-height // rows_per_band))
    return row_ranges(height, bands)


def transform(
    pair: ValidatedPair,
    blend: Blend = Blend.BLACK,
    *,
    workers: Optional[int] = None,
    min_parallel_pixels: int = DEFAULT_MIN_PARALLEL_PIXELS,
    band_pixels: int = DEFAULT_BAND_PIXELS,
) -> np.ndarray:
    """
    Apply the recovery kernel to every pixel of a validated pair.

    Rows are split into bands of bounded size and handed to a pool of
    `workers` threads; each band writes only its own slice of the output.
    NumPy releases the GIL during the elementwise work, so thread workers
    run concurrently. The output is identical for any worker count or
    band size.

    Returns:
        (H, W, C+1) array with the inputs' dtype, alpha last.
    """
    geometry = pair.geometry
    black, white = pair.black, pair.white
    out = np.empty((geometry.height, geometry.width, geometry.output_channels), dtype=black.dtype)

    def _recover_rows(lo: int, hi: int) -> None:
        out[lo:hi] = recover_block(black[lo:hi], white[lo:hi], geometry.max_value, blend)

    workers = max(1, workers or os.cpu_count() or 1)
    ranges = band_ranges(geometry.height, geometry.width, workers, band_pixels)

    if geometry.pixel_count < min_parallel_pixels or workers == 1 or len(ranges) <= 1:
        logger.debug(f"Recovering {geometry.pixel_count} pixels in {len(ranges)} row bands on the calling thread")
        for lo, hi in ranges:
            _recover_rows(lo, hi)
        return out

    logger.debug(f"Recovering {geometry.pixel_count} pixels in {len(ranges)} row bands on {workers} workers")
    with ThreadPoolExecutor(max_workers=min(workers, len(ranges))) as pool:
        futures: List[Future[None]] = [pool.submit(_recover_rows, lo, hi) for lo, hi in ranges]
        for fut in futures:
            fut.result()

    return out
