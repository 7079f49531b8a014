"""Fixed-size RGB canvas mirroring the device display."""

from __future__ import annotations

import numpy as np
from PIL import Image

from pixoo_display.errors import ConfigurationError
from pixoo_display.protocol import VALID_SIZES

from .color import Color, Palette


class FrameBuffer:
    """Row-major RGB pixel store for one ``size`` x ``size`` device canvas.

    Writes outside the canvas are silently dropped; only the size is validated.
    """

    def __init__(self, size: int = 64, fill: Color = Palette.BLACK) -> None:
        if size not in VALID_SIZES:
            raise ConfigurationError(f"Invalid screen size {size}; valid options are 16, 32 and 64")
        self.size = size
        self._pixels = np.zeros((size, size, 3), dtype=np.uint8)
        if fill != Palette.BLACK:
            self.fill(fill)

    @property
    def pixel_count(self) -> int:
        return self.size * self.size

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def fill(self, color: Color) -> None:
        self._pixels[:, :] = color.as_tuple()

    def clear(self) -> None:
        self.fill(Palette.BLACK)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if not self._in_bounds(x, y):
            return
        self._pixels[y, x] = color.as_tuple()

    def set_pixel_by_index(self, index: int, color: Color) -> None:
        if not 0 <= index < self.pixel_count:
            return
        self.set_pixel(index % self.size, index // self.size, color)

    def get_pixel(self, x: int, y: int) -> Color | None:
        if not self._in_bounds(x, y):
            return None
        r, g, b = (int(v) for v in self._pixels[y, x])
        return Color(r, g, b)

    def blit(self, rgb: np.ndarray, x: int = 0, y: int = 0) -> None:
        """Paint an ``(h, w, 3)`` array with its top-left at ``(x, y)``, clipped to the canvas."""
        h, w = rgb.shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, self.size), min(y + h, self.size)
        if x0 >= x1 or y0 >= y1:
            return
        self._pixels[y0:y1, x0:x1] = rgb[y0 - y : y1 - y, x0 - x : x1 - x, :3]

    def to_bytes(self) -> bytes:
        return self._pixels.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels)

    def copy(self) -> FrameBuffer:
        clone = FrameBuffer(self.size)
        clone._pixels[:] = self._pixels
        return clone
