"""Renderer package for Pixoo canvas drawing and image composition."""

from .color import Color, Palette, clamp
from .compositor import ImageCompositor, load_image, pad_to_canvas, resample
from .frames import decode_animation
from .framebuffer import FrameBuffer
from .glyphs import GLYPH_STRIDE, is_supported, retrieve_glyph, supported_characters
from .models import DEFAULT_FRAME_DELAY_MS, AnimationFrame, ResampleMode
from .patterns import PATTERN_NAMES, build_test_pattern
from .raster import TEXT_ADVANCE, Rasterizer, line_points

__all__ = [
    "AnimationFrame",
    "Color",
    "DEFAULT_FRAME_DELAY_MS",
    "FrameBuffer",
    "GLYPH_STRIDE",
    "ImageCompositor",
    "PATTERN_NAMES",
    "Palette",
    "Rasterizer",
    "ResampleMode",
    "TEXT_ADVANCE",
    "build_test_pattern",
    "clamp",
    "decode_animation",
    "is_supported",
    "line_points",
    "load_image",
    "pad_to_canvas",
    "resample",
    "retrieve_glyph",
    "supported_characters",
]
