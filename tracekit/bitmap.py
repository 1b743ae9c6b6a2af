"""RGB floating point images and their tonemapped PNG output."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from tracekit.common import TracerError

logger = logging.getLogger(__name__)


def _linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Vectorised linear RGB to sRGB conversion."""
    positive = np.maximum(values, 0.0)
    curve = (1.0 + 0.055) * np.power(positive, 1.0 / 2.4) - 0.055
    return np.where(values <= 0.0031308, 12.92 * values, curve)


class Bitmap:
    """A ``height`` x ``width`` image holding one linear RGB triple per pixel."""

    def __init__(self, width: int = 0, height: int = 0, data=None) -> None:
        if data is None:
            self.data = np.zeros((height, width, 3), dtype=float)
            return
        array = np.array(data, dtype=float)
        if array.shape != (height, width, 3):
            raise TracerError(
                f"Bitmap data of shape {array.shape} does not match "
                f"{width}x{height} RGB pixels"
            )
        self.data = array

    @classmethod
    def from_array(cls, data) -> Bitmap:
        """Wrap an array of shape (rows, cols, 3)."""
        array = np.array(data, dtype=float)
        if array.ndim != 3 or array.shape[2] != 3:
            raise TracerError("Bitmap data must have shape (rows, cols, 3)")
        return cls(array.shape[1], array.shape[0], array)

    @property
    def rows(self) -> int:
        """Image height in pixels."""
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        """Image width in pixels."""
        return self.data.shape[1]

    def to_srgb8(self) -> np.ndarray:
        """Tonemap to sRGB and quantise to 8 bits per channel."""
        srgb = _linear_to_srgb(self.data)
        scaled = np.nan_to_num(255.0 * srgb, nan=0.0, posinf=255.0, neginf=0.0)
        return np.clip(scaled, 0.0, 255.0).astype(np.uint8)

    def save_png(self, filename) -> Path:
        """Write a tonemapped PNG to ``filename`` + ``.png`` and return its path."""
        logger.info(
            'Writing a %dx%d PNG file to "%s"', self.cols, self.rows, filename
        )
        path = Path(f"{filename}.png")
        image = Image.fromarray(self.to_srgb8(), mode="RGB")
        try:
            image.save(path, format="PNG")
        except OSError as exc:
            raise TracerError(f'Could not save PNG file "{path}"') from exc
        return path