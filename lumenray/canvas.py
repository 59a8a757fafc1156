"""
Pixel storage and image output.

The canvas holds unclamped float colors; clamping and quantization to
8 bits only happen when the image is written out.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from .vec3 import Color

logger = logging.getLogger(__name__)

PPM_LINE_LIMIT = 70


class Canvas:
    """A width x height grid of colors, black initially."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.float64)

    @property
    def pixels(self) -> np.ndarray:
        """Float pixel data of shape (height, width, 3)."""
        return self._pixels

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} canvas"
            )

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        self._check(x, y)
        self._pixels[y, x] = color.to_array()

    def pixel_at(self, x: int, y: int) -> Color:
        self._check(x, y)
        return Color.from_array(self._pixels[y, x].copy())

    def write_block(self, x0: int, y0: int, block: np.ndarray) -> None:
        """Copy a (rows, cols, 3) block of colors with its top-left corner at (x0, y0)."""
        rows, cols = block.shape[:2]
        self._check(x0, y0)
        self._check(x0 + cols - 1, y0 + rows - 1)
        self._pixels[y0:y0 + rows, x0:x0 + cols] = block

    def to_rgb_array(self) -> np.ndarray:
        """Clamp to [0, 1] and quantize to a uint8 array of shape (height, width, 3)."""
        return np.rint(np.clip(self._pixels, 0.0, 1.0) * 255).astype(np.uint8)

    def to_ppm(self) -> str:
        """Serialize as a plain-text PPM (P3).

        Each pixel row starts on a new line and lines are wrapped so none
        is longer than 70 characters. The output ends with a newline.
        """
        lines = ["P3", f"{self.width} {self.height}", "255"]
        rgb = self.to_rgb_array()

        for row in rgb:
            line = ""
            for value in row.reshape(-1):
                token = str(int(value))
                if not line:
                    line = token
                elif len(line) + 1 + len(token) > PPM_LINE_LIMIT:
                    lines.append(line)
                    line = token
                else:
                    line = f"{line} {token}"
            lines.append(line)

        return "\n".join(lines) + "\n"

    def save(self, path: Union[str, Path]) -> None:
        """Write the image to disk.

        `.ppm` files are written as text PPM; any other extension is
        handed to Pillow, which picks the format from it.

        Args:
            path: Output file path
        """
        path = Path(path)
        if path.suffix.lower() == '.ppm':
            path.write_text(self.to_ppm())
        else:
            Image.fromarray(self.to_rgb_array()).save(path)
        logger.info("Saved %dx%d image to %s", self.width, self.height, path)

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"
