# services/recovery_kernel.py
"""
Difference-matting math.

A foreground `fg` with coverage `a`, composited over a solid background
`bg`, is observed as  obs = fg*a + bg*(1-a).  Rendered over black (0)
and over white (1):

    black = fg*a
    white = fg*a + (1 - a)

so every channel gives its own estimate  a_c = 1 - (white - black).
The pixel's alpha is the largest of those estimates, clamped to [0, 1].
Foreground is then  black / a  (0 where a == 0).

Everything runs on float64 samples normalized by 2**D - 1; rounding
happens once, when the result is quantized back to the input depth.
Based on https://www.interact-sw.co.uk/iangblog/2007/01/30/recoveralpha
"""
from __future__ import annotations
from typing import NamedTuple, Sequence, Tuple
import numpy as np

from ..models.blend import Blend


class RecoveredPixel(NamedTuple):
    foreground: Tuple[int, ...]
    alpha: int


def _dtype_for(max_value: int) -> np.dtype:
    return np.dtype(np.uint8) if max_value <= 0xFF else np.dtype(np.uint16)


def _quantize(values: np.ndarray, max_value: int, dtype: np.dtype) -> np.ndarray:
    return np.clip(np.rint(values * max_value), 0, max_value).astype(dtype)


def _foreground_source(black: np.ndarray, white: np.ndarray,
                       alpha: np.ndarray, blend: Blend) -> np.ndarray:
    """Premultiplied foreground (fg*a) as seen by the selected composite."""
    if blend is Blend.BLACK:
        return black
    from_white = white - (1.0 - alpha)
    if blend is Blend.WHITE:
        return from_white
    return (black + from_white) / 2.0


def recover_block(black: np.ndarray, white: np.ndarray, max_value: int,
                  blend: Blend = Blend.BLACK) -> np.ndarray:
    """
    Recover alpha + foreground for a block of pixels.

    Args:
        black: (..., C) integer samples composited over black.
        white: (..., C) integer samples composited over white, same shape.
        max_value: 2**D - 1 for the samples' bit depth.
        blend: which composite the foreground color is taken from.

    Returns:
        (..., C+1) array, dtype of `black`: C foreground samples then alpha.
    """
    blend = Blend(blend)
    b = np.asarray(black, dtype=np.float64) / max_value
    w = np.asarray(white, dtype=np.float64) / max_value

    alpha = np.clip((1.0 - (w - b)).max(axis=-1), 0.0, 1.0)
    alpha_c = alpha[..., None]

    source = _foreground_source(b, w, alpha_c, blend)
    fg = np.divide(source, alpha_c, out=np.zeros_like(source), where=alpha_c > 0)
    fg = np.clip(fg, 0.0, 1.0)

    dtype = np.asarray(black).dtype
    out = np.empty(fg.shape[:-1] + (fg.shape[-1] + 1,), dtype=dtype)
    out[..., :-1] = _quantize(fg, max_value, dtype)
    out[..., -1] = _quantize(alpha, max_value, dtype)
    return out


def recover(black_pixel: Sequence[int], white_pixel: Sequence[int], max_value: int,
            blend: Blend = Blend.BLACK) -> RecoveredPixel:
    """Single-pixel form of recover_block; the arithmetic is shared."""
    dtype = _dtype_for(max_value)
    block = recover_block(np.asarray(black_pixel, dtype=dtype)[None, :],
                          np.asarray(white_pixel, dtype=dtype)[None, :],
                          max_value, blend)[0]
    return RecoveredPixel(foreground=tuple(int(v) for v in block[:-1]),
                          alpha=int(block[-1]))
