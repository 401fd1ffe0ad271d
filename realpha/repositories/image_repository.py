from pathlib import Path
from typing import Union
import logging
import numpy as np
import cv2
import png
from PIL import Image as PILImage, UnidentifiedImageError

from ..models.image import Image
from ..models.errors import UnsupportedFormat

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image entities.

    • Decodes with OpenCV so 16-bit samples survive the round trip.
    • Pillow only peeks at the container (palette / frame count) and
      writes 8-bit gray+alpha, which OpenCV cannot encode.
    • pypng writes 16-bit gray+alpha, which neither of the above can.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    # ---------- private helpers ----------
    @staticmethod
    def _check_container(path: Path) -> None:
        """
        Reject palette and animated images before OpenCV silently
        expands / flattens them.
        """
        try:
            with PILImage.open(path) as pil:
                if pil.mode in ("P", "PA"):
                    raise UnsupportedFormat(path, "palette-based images are not supported")
                if getattr(pil, "n_frames", 1) > 1:
                    raise UnsupportedFormat(path, "multi-frame images are not supported")
        except UnidentifiedImageError:
            # Formats Pillow does not know (e.g. EXR) are left to OpenCV.
            logger.debug(f"Pillow cannot identify {path}, skipping container check")

    @staticmethod
    def _to_rgb_order(arr: np.ndarray) -> np.ndarray:
        if arr.ndim == 2:
            return arr[:, :, None]
        if arr.shape[2] == 3:
            return np.ascontiguousarray(arr[:, :, ::-1])
        if arr.shape[2] == 4:
            return np.ascontiguousarray(arr[:, :, [2, 1, 0, 3]])
        return arr

    @staticmethod
    def _to_bgr_order(arr: np.ndarray) -> np.ndarray:
        if arr.ndim == 3 and arr.shape[2] == 1:
            return arr[:, :, 0]
        if arr.ndim == 3 and arr.shape[2] == 3:
            return np.ascontiguousarray(arr[:, :, ::-1])
        if arr.ndim == 3 and arr.shape[2] == 4:
            return np.ascontiguousarray(arr[:, :, [2, 1, 0, 3]])
        return arr

    # ---------- public API ----------
    @classmethod
    def load(cls, path: Union[str, Path]) -> Image:
        """
        Returns an Image whose pixels are (H, W, C), RGB order, with the
        file's native sample type (uint8 or uint16).
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")

        cls._check_container(path)

        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        if arr.dtype.kind == "f":
            raise UnsupportedFormat(path, f"{arr.dtype.itemsize * 8}-bit float samples are not supported")

        logger.debug(f"Loaded {path.name}: shape={arr.shape} dtype={arr.dtype}")
        return Image(pixels=cls._to_rgb_order(arr), path=path)

    @classmethod
    def save(cls, image: Image) -> None:
        """
        Always writes PNG (the only common format keeping both 16-bit
        samples and alpha), whatever the destination suffix says.
        """
        if image.path is None:
            raise ValueError("Image has no destination path")

        pixels = image.pixels
        channels = pixels.shape[2] if pixels.ndim == 3 else 1

        if channels == 2 and pixels.dtype == np.uint8:
            PILImage.fromarray(np.ascontiguousarray(pixels)).save(image.path, format="PNG")
            return

        if channels == 2:
            height, width = pixels.shape[:2]
            writer = png.Writer(width, height, greyscale=True, alpha=True, bitdepth=16)
            with open(image.path, "wb") as fh:
                writer.write(fh, (row.tolist() for row in pixels.reshape(height, width * 2)))
            return

        ok, buf = cv2.imencode(".png", cls._to_bgr_order(pixels))
        if not ok:
            raise OSError(f"PNG encoding failed for {image.path}")
        Path(image.path).write_bytes(buf.tobytes())
