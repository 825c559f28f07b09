"""
Module: engine.markers

Purpose:
    Per-choice marker bookkeeping: how many instances to show, reconciling
    displayed instances against the persisted field, and rebuilding the
    field after a drop or keyboard commit.

Key Classes:
    - MarkerSlot: One required display slot
    - ReconcilePlan: Instances to create, keep and tear down for a choice
    - MarkerSetController: Operations over a QuestionSession

Dependencies:
    - engine.codec: Persisted field format
    - engine.mapper: Bounds checks

Used By:
    - engine.interaction: Redraws and commits
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import HOME_Y_OFFSET
from ..core.errors import FormatError
from ..core.models.geometry import Point
from ..core.models.markers import Choice, MarkerInstance
from .codec import decode_points, encode_points
from .session import QuestionSession

logger = logging.getLogger(__name__)


@dataclass
class MarkerSlot:
    """
    One slot the choice must display.

    Attributes:
        index: Instance index for the slot
        position: Image-relative position, or None for the home spare
        instance: Existing instance reused for the slot (None = create)
    """

    index: int
    position: Optional[Point]
    instance: Optional[MarkerInstance] = None


@dataclass
class ReconcilePlan:
    """Outcome of reconciling a choice's instances against its field."""

    choice_no: int
    to_create: list[MarkerSlot] = field(default_factory=list)
    to_keep: list[MarkerSlot] = field(default_factory=list)
    to_remove: list[MarkerInstance] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.to_create and not self.to_remove


class MarkerSetController:
    """
    Marker instance management for one session.

    Example:
        >>> markers = MarkerSetController(session)
        >>> markers.required_display_count(session.choice(1))
        1
    """

    def __init__(self, session: QuestionSession):
        self.session = session

    # ─────────────────────────────────────────────────────────────────────────
    # Counting
    # ─────────────────────────────────────────────────────────────────────────

    def placements(self, choice: Choice) -> list[Point]:
        """
        Decoded placements from the choice's persisted field.

        A malformed field is logged and treated as holding no placements;
        other choices are unaffected.
        """
        try:
            return decode_points(choice.value)
        except FormatError as e:
            logger.warning(f"Ignoring malformed field for choice {choice.choice_no}: {e}")
            return []

    def _wants_spare(self, choice: Choice, shown: int) -> bool:
        return choice.unlimited or shown < choice.max_count

    def required_display_count(self, choice: Choice) -> int:
        """
        Number of markers the choice shows.

        Placed markers plus the one being dragged, plus one spare at home
        when the policy is unlimited or the maximum has not been reached.
        """
        shown = len(self.placements(choice)) + (1 if choice.dragging is not None else 0)
        if self._wants_spare(choice, shown):
            shown += 1
        return shown

    def required_slots(self, choice: Choice) -> list[Optional[Point]]:
        """
        Positions for the slots to (re)build, by instance index.

        The dragged instance keeps its own slot-less existence, so it is
        not counted here; None marks the home spare.
        """
        slots: list[Optional[Point]] = list(self.placements(choice))
        shown = len(slots) + (1 if choice.dragging is not None else 0)
        if self._wants_spare(choice, shown):
            slots.append(None)
        return slots

    # ─────────────────────────────────────────────────────────────────────────
    # Reconciliation
    # ─────────────────────────────────────────────────────────────────────────

    def recompute_instances(
        self,
        choice: Choice,
        current: Optional[list[MarkerInstance]] = None,
    ) -> ReconcilePlan:
        """
        Reconcile displayed instances with the required slots.

        Every existing instance starts as a removal candidate. Each slot
        reuses the first instance already at its index unless that index is
        being dragged, in which case a fresh clone is scheduled. Candidates
        left over are torn down, except the one being dragged.

        Args:
            choice: Choice to reconcile
            current: Instances to reconcile (defaults to choice.instances)

        Returns:
            ReconcilePlan describing the changes; nothing is mutated
        """
        current = list(choice.instances if current is None else current)
        plan = ReconcilePlan(choice_no=choice.choice_no)
        unneeded = list(current)

        for index, position in enumerate(self.required_slots(choice)):
            at_index = [i for i in current if i.index == index]
            if not at_index or any(i.dragging for i in at_index):
                plan.to_create.append(MarkerSlot(index=index, position=position))
                continue
            keep = at_index[0]
            unneeded.remove(keep)
            plan.to_keep.append(MarkerSlot(index=index, position=position, instance=keep))

        plan.to_remove = [i for i in unneeded if not i.dragging]
        return plan

    def apply(self, choice: Choice, plan: ReconcilePlan) -> list[MarkerInstance]:
        """Carry out a plan; returns the instances created."""
        for slot in plan.to_keep:
            slot.instance.position = slot.position
            slot.instance.drag_xy = None
        for instance in plan.to_remove:
            choice.instances.remove(instance)
        created = []
        for slot in plan.to_create:
            clone = MarkerInstance(
                choice_no=choice.choice_no,
                index=slot.index,
                label=choice.label,
                position=slot.position,
            )
            choice.instances.append(clone)
            created.append(clone)
        if not plan.is_noop:
            logger.debug(
                f"Choice {choice.choice_no}: +{len(plan.to_create)} "
                f"-{len(plan.to_remove)} ={len(plan.to_keep)}"
            )
        return created

    def redraw(self, choice: Choice) -> ReconcilePlan:
        plan = self.recompute_instances(choice)
        self.apply(choice, plan)
        return plan

    def redraw_all(self) -> list[ReconcilePlan]:
        return [self.redraw(choice) for choice in self.session.choices.values()]

    # ─────────────────────────────────────────────────────────────────────────
    # Saving
    # ─────────────────────────────────────────────────────────────────────────

    def save_placement(
        self,
        choice: Choice,
        just_dropped: Optional[MarkerInstance] = None,
    ) -> str:
        """
        Rebuild the persisted field from the displayed instances.

        Instances are scanned by index. The one being dragged has no stable
        position and is skipped, as is anything outside the image (an
        instance on the left/top edge counts as outside). `just_dropped` is
        appended last, unless some displayed instance already carries the
        same label. Order is never sorted by position.

        Returns:
            Encoded field; the caller stores it on the choice
        """
        mapper = self.session.mapper()
        coords: list[Point] = []
        add_dropped = just_dropped is not None
        for instance in choice.ordered_instances():
            if (
                not instance.dragging
                and instance.position is not None
                and mapper.is_within_image(instance.position)
            ):
                coords.append(instance.position)
            if just_dropped is not None and instance.label == just_dropped.label:
                add_dropped = False
        if (
            add_dropped
            and just_dropped.position is not None
            and mapper.is_within_image(just_dropped.position)
        ):
            coords.append(just_dropped.position)
        return encode_points(coords)

    def commit(self, choice: Choice, just_dropped: Optional[MarkerInstance] = None) -> str:
        """Save placements and write them into the choice's field."""
        value = self.save_placement(choice, just_dropped)
        if value != choice.value:
            logger.debug(f"Choice {choice.choice_no} field: {choice.value!r} -> {value!r}")
        choice.value = value
        return value

    # ─────────────────────────────────────────────────────────────────────────
    # Positions
    # ─────────────────────────────────────────────────────────────────────────

    def home_xy(self, choice: Choice) -> Point:
        """Viewport point where a marker at home is drawn."""
        return Point(choice.home.x, choice.home.y - HOME_Y_OFFSET)

    def viewport_xy(self, instance: MarkerInstance) -> Point:
        """Viewport point where the instance is drawn right now."""
        if not self.session.image_ready:
            if instance.dragging and instance.drag_xy is not None:
                return instance.drag_xy
            return self.home_xy(self.session.choice(instance.choice_no))
        mapper = self.session.mapper()
        if instance.dragging and instance.drag_xy is not None:
            return mapper.page_to_viewport_xy(instance.drag_xy)
        return mapper.to_viewport_xy(self.image_xy(instance))

    def image_xy(self, instance: MarkerInstance) -> Point:
        """
        Image point of a resting instance; a marker at home maps its home
        point through the image layout (it may lie outside the image).
        """
        if instance.position is not None:
            return instance.position
        home = self.home_xy(self.session.choice(instance.choice_no))
        return self.session.mapper().from_viewport_xy(home)

    def page_xy(self, instance: MarkerInstance) -> Point:
        """Page point of a resting instance, in the space pointer events use."""
        return self.session.mapper().to_page_xy(self.image_xy(instance))
