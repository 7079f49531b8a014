"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from PIL import Image

DEFAULT_FRAME_DELAY_MS = 100


class ResampleMode(str, Enum):
    PIXEL_ART = "pixel-art"
    SMOOTH = "smooth"

    @property
    def pillow_filter(self) -> Image.Resampling:
        if self is ResampleMode.PIXEL_ART:
            return Image.Resampling.NEAREST
        return Image.Resampling.BICUBIC


@dataclass(frozen=True)
class AnimationFrame:
    image: Image.Image
    delay_ms: int = DEFAULT_FRAME_DELAY_MS

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height
