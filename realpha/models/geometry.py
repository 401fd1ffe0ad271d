from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class ImageGeometry:
    """
    Shared structure of a validated buffer pair.
    """
    width: int
    height: int
    channels: int   # 1 (grayscale) or 3 (RGB)
    bit_depth: int  # 8 or 16

    @property
    def max_value(self) -> int:
        return (1 << self.bit_depth) - 1

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def output_channels(self) -> int:
        return self.channels + 1

    @property
    def color_name(self) -> str:
        return "RGB" if self.channels == 3 else "grayscale"


@dataclass(frozen=True)
class ValidatedPair:
    """
    Both input buffers, reshaped to (H, W, C), plus their shared geometry.
    Only the validation service creates these.
    """
    geometry: ImageGeometry
    black: np.ndarray
    white: np.ndarray
