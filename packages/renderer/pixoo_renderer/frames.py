"""Multi-frame image decoding."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageSequence, UnidentifiedImageError

from pixoo_display.errors import ResourceError

from .models import DEFAULT_FRAME_DELAY_MS, AnimationFrame


def decode_animation(path: str | Path) -> list[AnimationFrame]:
    """Decode every frame of an animated image as RGBA plus its delay in milliseconds.

    Still images decode to a single frame.
    """
    path = Path(path)
    frames: list[AnimationFrame] = []
    try:
        with Image.open(path) as img:
            for frame in ImageSequence.Iterator(img):
                duration = frame.info.get("duration")
                delay_ms = int(duration) if duration is not None else DEFAULT_FRAME_DELAY_MS
                frames.append(AnimationFrame(image=frame.convert("RGBA"), delay_ms=delay_ms))
    except FileNotFoundError as exc:
        raise ResourceError(f"Animation not found: {path}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ResourceError(f"Animation unreadable: {path}: {exc}") from exc
    return frames
