"""
Module: core.models.markers

Purpose:
    Choices and their draggable marker instances.

    Unlike the immutable geometry models these are mutable: the interaction
    controller moves instances around and the marker set controller creates
    and tears them down on every redraw. They are the single source of truth
    for what the UI surface draws; the surface never holds marker state.

Key Classes:
    - Choice: One answerable slot with a placement count policy
    - MarkerInstance: One draggable copy of a choice's label
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .geometry import Point


@dataclass(eq=False)
class MarkerInstance:
    """
    One draggable marker belonging to a choice.

    Attributes:
        choice_no: Owning choice id
        index: 0-based instance index, unique among the needed instances
        label: Marker text, shared by every instance of the choice
        position: Image-relative position, or None when at home
        dragging: True while the pointer is dragging this instance
        drag_xy: Page point (pointer space) while dragging, None otherwise
    """

    choice_no: int
    index: int
    label: str
    position: Optional[Point] = None
    dragging: bool = False
    drag_xy: Optional[Point] = None

    @property
    def at_home(self) -> bool:
        return self.position is None

    @property
    def tab_index(self) -> int:
        """Keyboard focus order; clones take their instance index."""
        return self.index

    def send_home(self) -> None:
        self.position = None
        self.drag_xy = None

    def __repr__(self) -> str:
        where = "home" if self.position is None else str(self.position)
        flag = " dragging" if self.dragging else ""
        return f"MarkerInstance(choice{self.choice_no}.item{self.index} @ {where}{flag})"


@dataclass(eq=False)
class Choice:
    """
    One answerable slot in the question.

    Attributes:
        choice_no: Integer id
        label: Marker text
        max_count: Maximum number of markers for a fixed policy
        unlimited: True for the "infinite" policy (max_count ignored)
        value: Persisted field, "x1,y1;x2,y2;..." in image coordinates
        home: Viewport position of the home template
        instances: Marker instances currently displayed
    """

    choice_no: int
    label: str
    max_count: int = 1
    unlimited: bool = False
    value: str = ""
    home: Point = Point(0, 0)
    instances: list[MarkerInstance] = field(default_factory=list)

    @property
    def dragging(self) -> Optional[MarkerInstance]:
        """The instance being dragged, if any."""
        for instance in self.instances:
            if instance.dragging:
                return instance
        return None

    def instances_at(self, index: int) -> list[MarkerInstance]:
        """All displayed instances with the given index, in creation order."""
        return [i for i in self.instances if i.index == index]

    def ordered_instances(self) -> list[MarkerInstance]:
        """Instances sorted by index, creation order kept for ties."""
        return sorted(self.instances, key=lambda i: i.index)
