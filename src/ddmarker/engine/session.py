"""
Module: engine.session

Purpose:
    The explicit context object for one marker question.

    Everything the engine knows about a question lives here: choices and
    their marker instances, drop zones, the current image geometry, the
    shape registry and the current overlay. Every component receives the
    session it works on, so several questions can run side by side.

Key Classes:
    - QuestionSession: Per-question state
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import QuestionConfig
from ..core.errors import ConfigurationError, FormatError, ImageNotReadyError
from ..core.models.dropzones import DropZone, DropzoneLabel, OverlayDescriptor, ShapePrimitive
from ..core.models.geometry import ImageGeometry
from ..core.models.markers import Choice
from ..core.models.shapes import ShapeKind
from .mapper import CoordinateMapper

logger = logging.getLogger(__name__)


@dataclass
class QuestionSession:
    """
    State for one marker question.

    Attributes:
        choices: Choices keyed by choice number
        dropzones: Drop zones in id order
        read_only: Ignore pointer and keyboard input
        image: Current background image geometry (None until loaded)
        image_failed: The background image could not be loaded
        shapes: Registered shape primitives keyed by drop zone id
        labels: Drop-zone labels keyed by drop zone id
        overlay: The current overlay (None until first composed)
    """

    choices: dict[int, Choice] = field(default_factory=dict)
    dropzones: list[DropZone] = field(default_factory=list)
    read_only: bool = False
    image: Optional[ImageGeometry] = None
    image_failed: bool = False
    shapes: dict[int, ShapePrimitive] = field(default_factory=dict)
    labels: dict[int, DropzoneLabel] = field(default_factory=dict)
    overlay: Optional[OverlayDescriptor] = None

    @classmethod
    def from_config(cls, config: QuestionConfig) -> QuestionSession:
        """
        Build a session from the initial configuration.

        Drop zones with an unknown shape kind are kept out of the session
        (logged); they could never be drawn.
        """
        choices = {
            entry.choice_no: Choice(
                choice_no=entry.choice_no,
                label=entry.label,
                max_count=entry.max_count,
                unlimited=entry.unlimited,
                value=entry.value,
                home=entry.home,
            )
            for entry in config.choices
        }
        dropzones = []
        for zone_no, entry in enumerate(config.dropzones):
            try:
                kind = ShapeKind.parse(entry.shape)
            except FormatError as e:
                logger.warning(f"Skipping drop zone {zone_no}: {e}")
                continue
            dropzones.append(
                DropZone(zone_no=zone_no, label=entry.markertext, kind=kind, coords=entry.coords)
            )
        logger.debug(
            f"Session for {config.top_node}: {len(choices)} choices, {len(dropzones)} drop zones"
        )
        return cls(choices=choices, dropzones=dropzones, read_only=config.read_only)

    @property
    def image_ready(self) -> bool:
        return self.image is not None

    def mapper(self) -> CoordinateMapper:
        """
        Mapper for the current image geometry.

        Raises:
            ImageNotReadyError: If the image has not reported its geometry
        """
        if self.image is None:
            raise ImageNotReadyError("Background image geometry is not available yet")
        return CoordinateMapper(self.image)

    def choice(self, choice_no: int) -> Choice:
        """
        Look up a choice.

        Raises:
            ConfigurationError: If the choice was never configured
        """
        try:
            return self.choices[choice_no]
        except KeyError:
            raise ConfigurationError(f"Unknown choice number: {choice_no}") from None

    def answers(self) -> dict[int, str]:
        """Persisted field value of every choice."""
        return {no: choice.value for no, choice in self.choices.items()}
