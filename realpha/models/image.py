from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class Image:
    """
    Simple data object: decoded samples (+ optional path for bookkeeping).
    No codec logic outside the repository.
    """
    pixels: np.ndarray # Shape (H, W, C) or (H, W), dtype uint8 / uint16, RGB order.
    path: Path | None = None # Source (or destination) of the image.
