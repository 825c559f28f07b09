"""
Module: output.review

Purpose:
    Compose a review image for a marker question: the background image,
    the drop-zone overlay, drop-zone labels and every placed marker.

    The session is laid out so that viewport and image pixels coincide
    (the image sits one border width up and left of the origin), which lets
    label positions from the renderer be drawn directly.

Key Functions:
    - render_review(): Session + background -> RGBA image
    - render_review_from_config(): Convenience wrapper for the CLI

Dependencies:
    - PIL: Compositing and text
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw

from ..config import LABEL_OPACITY, MARKER_OPACITY, QuestionConfig
from ..core.errors import ConfigurationError
from ..core.models.dropzones import DropzoneLabel, OverlayDescriptor
from ..core.models.geometry import ImageGeometry
from ..engine.interaction import InteractionController
from ..engine.mapper import BORDER_WIDTH
from ..engine.session import QuestionSession
from .overlay import load_font, render_overlay

logger = logging.getLogger(__name__)

MARKER_ARM = 5
LABEL_PADDING = 2


def review_geometry(width: int, height: int) -> ImageGeometry:
    """Geometry under which viewport coordinates equal image pixels."""
    return ImageGeometry.at(-BORDER_WIDTH, -BORDER_WIDTH, width, height)


def _alpha(opacity: float) -> int:
    return round(255 * opacity)


def render_review(
    background: Image.Image,
    controller: InteractionController,
    *,
    font_size: int = 14,
) -> Image.Image:
    """
    Draw the current state of a question over its background image.

    Reports the background size to the controller as its image geometry,
    which triggers a full redraw first.

    Args:
        background: Background image (not modified)
        controller: Controller for the question's session

    Returns:
        New RGBA image, same size as the background
    """
    font = load_font(font_size)
    measurer = ImageDraw.Draw(Image.new("RGBA", (1, 1)))

    def measure(label: DropzoneLabel) -> tuple[float, float]:
        left, top, right, bottom = measurer.textbbox((0, 0), label.text, font=font)
        return (right - left + 2 * LABEL_PADDING, bottom - top + 2 * LABEL_PADDING)

    controller.measure = measure
    overlay: Optional[OverlayDescriptor] = controller.image_loaded(
        review_geometry(background.width, background.height)
    )

    result = background.convert("RGBA")
    if overlay is not None:
        result.alpha_composite(render_overlay(overlay), dest=(overlay.left, overlay.top))

    layer = Image.new("RGBA", result.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    session = controller.session
    for label in session.labels.values():
        if label.origin is None:
            continue
        x, y = round(label.origin[0]), round(label.origin[1])
        width, height = measure(label)
        draw.rectangle(
            (x, y, x + width, y + height),
            fill=(255, 255, 255, _alpha(LABEL_OPACITY)),
        )
        colour = (0, 0, 238, 255) if label.linked else (0, 0, 0, 255)
        draw.text((x + LABEL_PADDING, y + LABEL_PADDING), label.text, fill=colour, font=font)

    mapper = session.mapper()
    marker_fill = (0, 0, 0, _alpha(MARKER_OPACITY))
    for choice in session.choices.values():
        for instance in choice.ordered_instances():
            if instance.position is None or not mapper.is_within_image(instance.position):
                continue
            x, y = mapper.to_viewport_xy(instance.position)
            draw.line((x - MARKER_ARM, y, x + MARKER_ARM, y), fill=marker_fill, width=1)
            draw.line((x, y - MARKER_ARM, x, y + MARKER_ARM), fill=marker_fill, width=1)
            draw.text((x + MARKER_ARM + 1, y - MARKER_ARM), instance.label, fill=marker_fill, font=font)

    result = Image.alpha_composite(result, layer)
    logger.info(
        f"Rendered review: {len(session.shapes)} shapes, "
        f"{sum(len(c.instances) for c in session.choices.values())} markers"
    )
    return result


def render_review_from_config(config: QuestionConfig) -> tuple[Image.Image, QuestionSession]:
    """
    Load the background image named by `config` and render a review.

    Raises:
        ConfigurationError: If the background image cannot be opened
    """
    path = Path(config.background_image_url)
    try:
        with Image.open(path) as img:
            background = img.copy()
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot open background image {path}: {e}") from e

    session = QuestionSession.from_config(config)
    controller = InteractionController(session)
    return render_review(background, controller), session
