"""Image resampling and placement onto a FrameBuffer."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from pixoo_display.errors import ResourceError

from .framebuffer import FrameBuffer
from .models import ResampleMode

logger = logging.getLogger("pixoo.renderer")


def resample(image: Image.Image, size: int, mode: ResampleMode = ResampleMode.SMOOTH) -> Image.Image:
    if image.size == (size, size):
        return image
    return image.resize((size, size), resample=ResampleMode(mode).pillow_filter)


def load_image(path: str | Path) -> Image.Image:
    """Decode an image file fully; missing or undecodable files raise ``ResourceError``."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except FileNotFoundError as exc:
        raise ResourceError(f"Image not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ResourceError(f"Image unreadable: {path}: {exc}") from exc


def pad_to_canvas(image: Image.Image, size: int) -> Image.Image:
    """Center the unscaled image on a black square; oversized sources are cropped by the paste."""
    canvas = Image.new("RGB", (size, size), (0, 0, 0))
    offset = ((size - image.width) // 2, (size - image.height) // 2)
    canvas.paste(image.convert("RGB"), offset)
    return canvas


class ImageCompositor:
    def __init__(self, buffer: FrameBuffer) -> None:
        self.buffer = buffer

    def prepare(self, image: Image.Image, mode: ResampleMode = ResampleMode.SMOOTH, pad: bool = False) -> Image.Image:
        size = self.buffer.size
        if image.size == (size, size):
            return image
        if pad:
            prepared = pad_to_canvas(image, size)
        else:
            prepared = resample(image, size, mode)
        logger.debug(f"fitted image {image.size} -> {prepared.size} ({'pad' if pad else ResampleMode(mode).value})")
        return prepared

    def draw_image(
        self,
        source: Image.Image | str | Path,
        x: int = 0,
        y: int = 0,
        mode: ResampleMode = ResampleMode.SMOOTH,
        pad: bool = False,
    ) -> None:
        image = source if isinstance(source, Image.Image) else load_image(source)
        prepared = self.prepare(image, mode=mode, pad=pad)
        rgb = np.asarray(prepared.convert("RGB"), dtype=np.uint8)
        self.buffer.blit(rgb, x, y)
