"""
Module: config

Purpose:
    Initial configuration for one marker question, consumed once at startup.

    The mapping mirrors what the page supplies:
        {
            "dropzones": [{"markertext": ..., "shape": ..., "coords": ...}],
            "readonly": false,
            "topnode": "#q1",
            "bgimgurl": "background.png",
            "choices": [{"no": 1, "label": "A", "noofdrags": 1, "value": ""}]
        }

    Choices may also be described by the hidden-input markup contract
    ("choices choice3 noofdrags2 infinite") via ChoiceSpec.from_markup().

Key Classes:
    - DropzoneSpec: One drop zone as configured
    - ChoiceSpec: One choice as configured
    - QuestionConfig: Whole-question configuration (immutable)

Key Functions:
    - classname_numeric_suffix(): Read "prefixN" class names

Dependencies:
    - json, pathlib, re (std)
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .core.errors import ConfigurationError
from .core.models.geometry import Point

# Layout constants
LABEL_X_OFFSET = 4  # Labels sit this far left of their centred position
HOME_Y_OFFSET = 12  # Marker point is drawn this far above the home template
MARKER_OPACITY = 0.6
LABEL_OPACITY = 0.6


def classname_numeric_suffix(classes: str, prefix: str) -> Optional[int]:
    """
    Find the first "<prefix><digits>" class name and return its number.

    Example:
        >>> classname_numeric_suffix("choices choice3 noofdrags2", "choice")
        3
        >>> classname_numeric_suffix("choices", "choice") is None
        True
    """
    if not classes:
        return None
    pattern = re.compile(rf"^{re.escape(prefix)}([0-9]+)$")
    for name in classes.split():
        match = pattern.match(name)
        if match:
            return int(match.group(1))
    return None


@dataclass(frozen=True)
class DropzoneSpec:
    """
    A configured drop zone.

    Attributes:
        markertext: Label text (may be empty)
        shape: Shape kind name; validated when the zone is drawn
        coords: Geometry string for the shape
    """

    markertext: str
    shape: str
    coords: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DropzoneSpec:
        return cls(
            markertext=str(data.get("markertext", "")),
            shape=str(data.get("shape", "")),
            coords=str(data.get("coords", "")),
        )


@dataclass(frozen=True)
class ChoiceSpec:
    """
    A configured choice.

    Attributes:
        choice_no: Choice id
        label: Marker text
        max_count: Maximum markers for a fixed policy
        unlimited: "Infinite" policy
        value: Initial persisted field
        home: Viewport position of the home template
    """

    choice_no: int
    label: str
    max_count: int = 1
    unlimited: bool = False
    value: str = ""
    home: Point = Point(0, 0)

    def __post_init__(self) -> None:
        if self.max_count < 0:
            raise ConfigurationError(f"max_count must be >= 0: {self.max_count}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChoiceSpec:
        if "no" not in data:
            raise ConfigurationError(f"Choice without 'no': {dict(data)!r}")
        home = data.get("home") or (0, 0)
        return cls(
            choice_no=int(data["no"]),
            label=str(data.get("label", "")),
            max_count=int(data.get("noofdrags", 1)),
            unlimited=bool(data.get("infinite", False)),
            value=str(data.get("value", "")),
            home=Point(int(home[0]), int(home[1])),
        )

    @classmethod
    def from_markup(
        cls,
        classes: str,
        value: str = "",
        label: str = "",
        home: Point = Point(0, 0),
    ) -> ChoiceSpec:
        """
        Build from the hidden input's class attribute.

        Raises:
            ConfigurationError: If no "choiceN" class is present
        """
        choice_no = classname_numeric_suffix(classes, "choice")
        if choice_no is None:
            raise ConfigurationError(f"No choice number in classes {classes!r}")
        max_count = classname_numeric_suffix(classes, "noofdrags")
        return cls(
            choice_no=choice_no,
            label=label,
            max_count=max_count if max_count is not None else 0,
            unlimited="infinite" in classes.split(),
            value=value,
            home=home,
        )

    def to_dict(self) -> dict:
        return {
            "no": self.choice_no,
            "label": self.label,
            "noofdrags": self.max_count,
            "infinite": self.unlimited,
            "value": self.value,
            "home": [self.home.x, self.home.y],
        }


@dataclass(frozen=True)
class QuestionConfig:
    """
    Configuration for one marker question (immutable).

    Attributes:
        top_node: Reference to the container holding the question
        background_image_url: Background image location
        dropzones: Drop zones to show for review (may be empty)
        choices: Choices and their persisted fields
        read_only: Ignore pointer and keyboard input

    Example:
        >>> config = QuestionConfig.from_dict({"topnode": "#q1", "bgimgurl": "bg.png"})
        >>> config.read_only
        False
    """

    top_node: str
    background_image_url: str
    dropzones: tuple[DropzoneSpec, ...] = field(default_factory=tuple)
    choices: tuple[ChoiceSpec, ...] = field(default_factory=tuple)
    read_only: bool = False

    def __post_init__(self) -> None:
        """Validate required anchors on construction."""
        if not self.top_node:
            raise ConfigurationError("Missing top container reference (topnode)")
        if not self.background_image_url:
            raise ConfigurationError("Missing background image url (bgimgurl)")
        seen = set()
        for choice in self.choices:
            if choice.choice_no in seen:
                raise ConfigurationError(f"Duplicate choice number: {choice.choice_no}")
            seen.add(choice.choice_no)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuestionConfig:
        """
        Build from the init-configuration mapping.

        Raises:
            ConfigurationError: If required keys are missing
        """
        for key in ("topnode", "bgimgurl"):
            if not data.get(key):
                raise ConfigurationError(f"Missing required configuration key: {key!r}")
        return cls(
            top_node=str(data["topnode"]),
            background_image_url=str(data["bgimgurl"]),
            dropzones=tuple(DropzoneSpec.from_dict(d) for d in data.get("dropzones") or ()),
            choices=tuple(ChoiceSpec.from_dict(c) for c in data.get("choices") or ()),
            read_only=bool(data.get("readonly", False)),
        )

    @classmethod
    def from_json(cls, path: Path) -> QuestionConfig:
        """
        Load from a JSON file.

        A relative background image path is resolved against the file's
        directory.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a JSON object: {path}")
        bg = data.get("bgimgurl")
        if bg and "://" not in str(bg) and not Path(bg).is_absolute():
            data = {**data, "bgimgurl": str(path.parent / bg)}
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {
            "topnode": self.top_node,
            "bgimgurl": self.background_image_url,
            "readonly": self.read_only,
            "dropzones": [
                {"markertext": d.markertext, "shape": d.shape, "coords": d.coords}
                for d in self.dropzones
            ],
            "choices": [c.to_dict() for c in self.choices],
        }
