from typing import Tuple, Union
import logging
import numpy as np

from ..models.geometry import ImageGeometry, ValidatedPair
from ..models.errors import StructuralMismatch, UnsupportedLayout

logger = logging.getLogger(__name__)

SUPPORTED_CHANNELS = (1, 3)
SUPPORTED_BIT_DEPTHS = (8, 16)


class ValidationService:
    """
    Structural checks on a black/white buffer pair.

    Runs once per pair, before any pixel is touched. Pure: never copies
    or modifies the buffers.
    """

    @staticmethod
    def _as_samples(buffer: np.ndarray) -> np.ndarray:
        """(H, W) → (H, W, 1) view; (H, W, C) is returned as-is."""
        buffer = np.asarray(buffer)
        if buffer.ndim == 2:
            return buffer[:, :, None]
        return buffer

    @staticmethod
    def _dimensions(samples: np.ndarray) -> Tuple[int, int]:
        height, width = samples.shape[:2]
        return width, height

    @staticmethod
    def _channels(samples: np.ndarray) -> int:
        return samples.shape[2]

    @staticmethod
    def _bit_depth(samples: np.ndarray) -> Union[int, str]:
        """
        Bits per sample for unsigned integer buffers, the dtype name
        otherwise (never a supported depth).
        """
        if samples.dtype.kind == "u":
            return samples.dtype.itemsize * 8
        return str(samples.dtype)

    def validate(self, black: np.ndarray, white: np.ndarray) -> ValidatedPair:
        """
        Checks, in order, stopping at the first failure:
            1. width / height equal
            2. channel count equal and grayscale or RGB
            3. bit depth equal and 8 or 16

        Raises:
            StructuralMismatch: the two buffers disagree.
            UnsupportedLayout: they agree on something we cannot process.
        """
        black = self._as_samples(black)
        white = self._as_samples(white)
        if black.ndim != 3 or white.ndim != 3:
            raise UnsupportedLayout("array_rank", black.ndim, white.ndim)

        black_dims, white_dims = self._dimensions(black), self._dimensions(white)
        if black_dims != white_dims:
            raise StructuralMismatch("dimensions", black_dims, white_dims)

        black_channels, white_channels = self._channels(black), self._channels(white)
        if black_channels != white_channels:
            raise StructuralMismatch("channel_count", black_channels, white_channels)
        if black_channels not in SUPPORTED_CHANNELS:
            raise UnsupportedLayout("channel_count", black_channels, white_channels)

        black_depth, white_depth = self._bit_depth(black), self._bit_depth(white)
        if black_depth != white_depth:
            raise StructuralMismatch("bit_depth", black_depth, white_depth)
        if black_depth not in SUPPORTED_BIT_DEPTHS:
            raise UnsupportedLayout("bit_depth", black_depth, white_depth)

        width, height = black_dims
        geometry = ImageGeometry(width=width, height=height,
                                 channels=black_channels, bit_depth=black_depth)
        logger.debug(f"Validated pair: {geometry}")
        return ValidatedPair(geometry=geometry, black=black, white=white)
