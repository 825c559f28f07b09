"""
Module: output.overlay

Purpose:
    Rasterise an overlay descriptor with Pillow: translucent drop-zone
    shapes with a black 1px outline on a transparent layer the size of the
    background image.

Key Functions:
    - render_overlay(): OverlayDescriptor -> RGBA image
    - load_font(): TrueType font with fallback

Dependencies:
    - PIL: Image drawing

Used By:
    - output.review: Review image composition
"""

from __future__ import annotations

import logging

from PIL import Image, ImageColor, ImageDraw, ImageFont

from ..core.models.dropzones import OverlayDescriptor, ShapePrimitive
from ..core.models.shapes import Circle, Rectangle

logger = logging.getLogger(__name__)

OUTLINE_COLOR = (0, 0, 0, 255)
DEFAULT_FONT_SIZE = 14


def _fill_rgba(primitive: ShapePrimitive) -> tuple[int, int, int, int]:
    r, g, b = ImageColor.getrgb(primitive.colour)[:3]
    return (r, g, b, round(255 * primitive.fill_opacity))


def draw_primitive(layer: Image.Image, primitive: ShapePrimitive) -> None:
    """Draw one shape onto an RGBA layer (replaces pixels, no blending)."""
    draw = ImageDraw.Draw(layer)
    fill = _fill_rgba(primitive)
    shape = primitive.shape
    if isinstance(shape, Circle):
        box = (shape.cx - shape.r, shape.cy - shape.r, shape.cx + shape.r, shape.cy + shape.r)
        draw.ellipse(box, fill=fill, outline=OUTLINE_COLOR, width=1)
    elif isinstance(shape, Rectangle):
        box = (shape.x, shape.y, shape.x + shape.w, shape.y + shape.h)
        draw.rectangle(box, fill=fill, outline=OUTLINE_COLOR, width=1)
    else:
        draw.polygon([tuple(p) for p in shape.points], fill=fill, outline=OUTLINE_COLOR)


def render_overlay(overlay: OverlayDescriptor) -> Image.Image:
    """
    Render the overlay as a transparent RGBA image.

    Each shape is drawn on its own layer and alpha-composited, so
    overlapping zones blend instead of overwriting each other.

    Returns:
        RGBA image of size (overlay.width, overlay.height)

    Example:
        >>> img = render_overlay(overlay)
        >>> img.size == (overlay.width, overlay.height)
        True
    """
    result = Image.new("RGBA", (overlay.width, overlay.height), (0, 0, 0, 0))
    for primitive in overlay.primitives:
        layer = Image.new("RGBA", result.size, (0, 0, 0, 0))
        draw_primitive(layer, primitive)
        result = Image.alpha_composite(result, layer)
    logger.debug(f"Rendered overlay with {len(overlay.primitives)} shapes")
    return result


def load_font(size: int = DEFAULT_FONT_SIZE) -> ImageFont.ImageFont:
    """
    Load a font for label rendering.

    Falls back to Pillow's default font if no TrueType font is available.
    """
    font_options = [
        "arial.ttf",  # Windows
        "Arial.ttf",  # Mac
        "DejaVuSans.ttf",
    ]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default()
