"""Primitive drawing on a FrameBuffer: lines, rectangles and bitmap text."""

from __future__ import annotations

from collections.abc import Iterator

from .color import Color
from .framebuffer import FrameBuffer
from .glyphs import GLYPH_STRIDE, retrieve_glyph

TEXT_ADVANCE = 4


def line_points(x1: int, y1: int, x2: int, y2: int) -> Iterator[tuple[int, int]]:
    """Yield the integer Bresenham path from the first endpoint to the second, inclusive."""
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy
    x, y = x1, y1
    while True:
        yield x, y
        if x == x2 and y == y2:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


class Rasterizer:
    def __init__(self, buffer: FrameBuffer) -> None:
        self.buffer = buffer

    def draw_pixel(self, x: int, y: int, color: Color) -> None:
        self.buffer.set_pixel(x, y, color)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        for x, y in line_points(x1, y1, x2, y2):
            self.buffer.set_pixel(x, y, color)

    def draw_filled_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        for row in range(y, y + height):
            for col in range(x, x + width):
                self.buffer.set_pixel(col, row, color)

    def draw_character(self, character: str, x: int, y: int, color: Color) -> None:
        glyph = retrieve_glyph(character)
        if glyph is None:
            return
        for i, bit in enumerate(glyph):
            if bit:
                self.buffer.set_pixel(x + i % GLYPH_STRIDE, y + i // GLYPH_STRIDE, color)

    def draw_text(self, text: str, x: int, y: int, color: Color) -> None:
        # Fixed advance even for narrow glyphs.
        for index, character in enumerate(text):
            self.draw_character(character, x + TEXT_ADVANCE * index, y, color)
