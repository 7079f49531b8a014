"""Deterministic test patterns for device bring-up."""

from __future__ import annotations

from PIL import Image

PATTERN_NAMES = (
    "black",
    "white",
    "red",
    "green",
    "blue",
    "quadrants",
    "h-gradient",
    "v-gradient",
    "checkerboard",
)


def build_test_pattern(name: str, size: int) -> Image.Image:
    if name not in PATTERN_NAMES:
        raise ValueError(f"Unknown pattern: {name}")
    img = Image.new("RGB", (size, size), (0, 0, 0))
    px = img.load()
    half = size // 2
    cell = max(size // 8, 1)

    for y in range(size):
        for x in range(size):
            if name == "black":
                c = (0, 0, 0)
            elif name == "white":
                c = (255, 255, 255)
            elif name == "red":
                c = (255, 0, 0)
            elif name == "green":
                c = (0, 255, 0)
            elif name == "blue":
                c = (0, 0, 255)
            elif name == "quadrants":
                if x < half and y < half:
                    c = (255, 0, 0)
                elif x >= half and y < half:
                    c = (0, 255, 0)
                elif x < half and y >= half:
                    c = (0, 0, 255)
                else:
                    c = (255, 255, 255)
            elif name == "h-gradient":
                v = int(255 * (x / max(size - 1, 1)))
                c = (v, v, v)
            elif name == "v-gradient":
                v = int(255 * (y / max(size - 1, 1)))
                c = (v, v, v)
            else:
                c = (255, 255, 255) if ((x // cell + y // cell) % 2 == 0) else (0, 0, 0)
            px[x, y] = c
    return img
