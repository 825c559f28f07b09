"""
Module: engine.interaction

Purpose:
    Drag lifecycle and keyboard handling for a marker question.

    State machine:
        IDLE --pointer_down(instance)--> DRAGGING(instance)
        DRAGGING --pointer_up--> IDLE  (save placement, redraw)
        IDLE --key_press(focused instance)--> IDLE  (save placement, redraw)

    The UI surface calls these methods from its own event dispatch; the
    controller never reads state back from the surface. A save always runs
    before the redraw it triggers, so the redraw sees the new field value.

Key Classes:
    - KeyAction: Keyboard commands
    - Phase: IDLE | DRAGGING
    - InteractionController: Orchestrates markers and drop zones

Key Functions:
    - action_for_key(): Map key codes and key names to KeyAction
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Union

from ..core.models.dropzones import OverlayDescriptor
from ..core.models.geometry import ImageGeometry, Point
from ..core.models.markers import MarkerInstance
from .dropzones import DropzoneRenderer, LabelMeasure, _no_size
from .markers import MarkerSetController
from .session import QuestionSession

logger = logging.getLogger(__name__)


class KeyAction(Enum):
    """What a key press does to the focused marker."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)
    HOME = None

    @property
    def delta(self) -> Optional[tuple[int, int]]:
        return self.value


KEY_CODES: dict[int, KeyAction] = {
    32: KeyAction.HOME,  # Space
    27: KeyAction.HOME,  # Escape
    37: KeyAction.LEFT,
    38: KeyAction.UP,
    39: KeyAction.RIGHT,
    40: KeyAction.DOWN,
    65: KeyAction.LEFT,  # a
    87: KeyAction.UP,  # w
    68: KeyAction.RIGHT,  # d
    83: KeyAction.DOWN,  # s
}

KEY_NAMES: dict[str, KeyAction] = {
    " ": KeyAction.HOME,
    "space": KeyAction.HOME,
    "escape": KeyAction.HOME,
    "esc": KeyAction.HOME,
    "arrowleft": KeyAction.LEFT,
    "left": KeyAction.LEFT,
    "a": KeyAction.LEFT,
    "arrowup": KeyAction.UP,
    "up": KeyAction.UP,
    "w": KeyAction.UP,
    "arrowright": KeyAction.RIGHT,
    "right": KeyAction.RIGHT,
    "d": KeyAction.RIGHT,
    "arrowdown": KeyAction.DOWN,
    "down": KeyAction.DOWN,
    "s": KeyAction.DOWN,
}


def action_for_key(key: Union[int, str]) -> Optional[KeyAction]:
    """
    Keyboard command for a key code or key name; None if the key is ignored.

    Example:
        >>> action_for_key(37)
        <KeyAction.LEFT: (-1, 0)>
        >>> action_for_key("W")
        <KeyAction.UP: (0, -1)>
        >>> action_for_key("q") is None
        True
    """
    if isinstance(key, int):
        return KEY_CODES.get(key)
    if key == " ":
        return KeyAction.HOME
    return KEY_NAMES.get(key.strip().lower())


class Phase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class InteractionController:
    """
    Single source of truth for the drag state of one question.

    Args:
        session: Question state
        markers: Marker controller (built from session if omitted)
        renderer: Drop-zone renderer (built from session if omitted)
        measure: Label size callback used when laying out drop-zone labels
        on_redraw: Called after every redraw with the new overlay
        constrain_pointer: Clamp pointer drags to the image; off by default
            so that dropping a marker off the image sends it home
    """

    def __init__(
        self,
        session: QuestionSession,
        markers: Optional[MarkerSetController] = None,
        renderer: Optional[DropzoneRenderer] = None,
        *,
        measure: LabelMeasure = _no_size,
        on_redraw: Optional[Callable[[Optional[OverlayDescriptor]], None]] = None,
        constrain_pointer: bool = False,
    ):
        self.session = session
        self.markers = markers or MarkerSetController(session)
        self.renderer = renderer or DropzoneRenderer(session)
        self.measure = measure
        self.on_redraw = on_redraw
        self.constrain_pointer = constrain_pointer
        self.active: Optional[MarkerInstance] = None

    @property
    def phase(self) -> Phase:
        return Phase.IDLE if self.active is None else Phase.DRAGGING

    @property
    def enabled(self) -> bool:
        """Input is accepted: not read-only and the image is ready."""
        return not self.session.read_only and self.session.image_ready

    # ─────────────────────────────────────────────────────────────────────────
    # Image lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def image_loaded(self, geometry: ImageGeometry) -> Optional[OverlayDescriptor]:
        """The background image is ready; first full redraw."""
        logger.debug(f"Background image ready: {geometry.width}x{geometry.height}")
        self.session.image = geometry
        self.session.image_failed = False
        return self.redraw()

    def image_failed(self, reason: str = "") -> None:
        """The background image could not load; interaction stays disabled."""
        logger.error(f"Background image failed to load: {reason or 'unknown error'}")
        self.session.image = None
        self.session.image_failed = True

    def resized(self, geometry: ImageGeometry) -> Optional[OverlayDescriptor]:
        """Layout changed; redraw against the new geometry."""
        if not self.session.image_ready:
            return None
        self.session.image = geometry
        return self.redraw()

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer
    # ─────────────────────────────────────────────────────────────────────────

    def pointer_down(self, instance: MarkerInstance, page_xy: tuple[int, int]) -> bool:
        """Start dragging `instance`; ignored when disabled or already dragging."""
        if not self.enabled or self.active is not None:
            return False
        instance.drag_xy = self.markers.page_xy(instance)
        instance.dragging = True
        self.active = instance
        logger.debug(f"Drag start {instance!r} at {tuple(page_xy)}")
        return True

    def pointer_move(self, page_xy: tuple[int, int]) -> bool:
        """Move the dragged marker to follow the pointer."""
        if self.active is None:
            return False
        point = Point(int(page_xy[0]), int(page_xy[1]))
        if self.constrain_pointer:
            point = self.session.mapper().clamp_to_image(point)
        self.active.drag_xy = point
        return True

    def pointer_up(self, page_xy: Optional[tuple[int, int]] = None) -> Optional[str]:
        """
        Drop the dragged marker where it is.

        Returns:
            The choice's new field value, or None if nothing was dragged
        """
        instance = self.active
        if instance is None:
            return None
        if page_xy is not None:
            self.pointer_move(page_xy)
        mapper = self.session.mapper()
        instance.position = mapper.to_image_xy(instance.drag_xy)
        instance.dragging = False
        instance.drag_xy = None
        self.active = None
        logger.debug(f"Drop {instance!r}")
        choice = self.session.choice(instance.choice_no)
        value = self.markers.commit(choice, instance)
        self.redraw()
        return value

    # ─────────────────────────────────────────────────────────────────────────
    # Keyboard
    # ─────────────────────────────────────────────────────────────────────────

    def key_press(self, instance: MarkerInstance, key: Union[int, str]) -> bool:
        """
        Nudge the focused marker one unit, or send it home.

        Returns:
            True if the key was handled (and a redraw happened)
        """
        if not self.enabled or self.active is not None:
            return False
        action = action_for_key(key)
        if action is None:
            return False

        if action is KeyAction.HOME:
            instance.send_home()
        else:
            dx, dy = action.delta
            moved = self.markers.image_xy(instance).moved(dx, dy)
            instance.position = self.session.mapper().clamp_image_xy(moved)

        choice = self.session.choice(instance.choice_no)
        self.markers.commit(choice, instance)
        self.redraw()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Drop zones
    # ─────────────────────────────────────────────────────────────────────────

    def label_clicked(self, zone_no: int) -> bool:
        """A linked drop-zone label was clicked: highlight its shape."""
        label = self.session.labels.get(zone_no)
        if label is None or not label.linked:
            return False
        if not self.renderer.highlight(zone_no):
            return False
        overlay = self.renderer.compose()
        if self.on_redraw is not None:
            self.on_redraw(overlay)
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Redraw
    # ─────────────────────────────────────────────────────────────────────────

    def redraw(self) -> Optional[OverlayDescriptor]:
        """
        Rebuild every choice's instances and the drop-zone overlay.

        Idempotent: running it twice in a row changes nothing the second
        time.
        """
        if not self.session.image_ready:
            logger.debug("Redraw skipped: background image not ready")
            return None
        self.markers.redraw_all()
        overlay = self.renderer.draw_all(self.measure)
        if self.on_redraw is not None:
            self.on_redraw(overlay)
        return overlay
