from pathlib import Path

import cv2
import numpy as np
import pytest


@pytest.fixture
def write_png(tmp_path):
    """Write an (H, W[, C]) RGB-order array to a PNG under tmp_path."""
    def _write(name: str, pixels: np.ndarray) -> Path:
        path = tmp_path / name
        arr = pixels
        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]
        elif arr.ndim == 3 and arr.shape[2] == 3:
            arr = arr[:, :, ::-1]
        assert cv2.imwrite(str(path), np.ascontiguousarray(arr))
        return path
    return _write


def consistent_pair(rng: np.random.Generator, shape, max_value: int, dtype):
    """
    Black/white composites of a random foreground whose channels all
    agree on alpha, so the exact inversion exists.
    """
    alpha = rng.integers(0, max_value + 1, size=shape[:-1] + (1,))
    black = rng.integers(0, alpha + 1, size=shape)
    white = black + (max_value - alpha)
    return black.astype(dtype), white.astype(dtype)
