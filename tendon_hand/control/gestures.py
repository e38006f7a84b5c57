"""
Gesture store - named hand poses that can be recalled, edited, and exported.

Gesture file format (JSON):

    {
      "Fist": {
        "description": "Closed hand",
        "angles": {"TH": 80, "IN": 120, "MI": 120, "RI": 120, "PI": 120},
        "palm_displacement": []
      },
      ...
    }

Shorthands TH, IN, MI, RI, PI map to actuator ids 0-4. Target angles are
servo horn angles in [0, 180]. Unknown fields are kept and written back
on export.
"""

import json
import logging
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import ANGLE_MAX, ANGLE_MIN, ANGLE_NEUTRAL, FINGER_SHORTHANDS
from ..physics.actuation import command_from_angle
from .registry import ActuatorRegistry

logger = logging.getLogger(__name__)

# Pseudo-gesture: selecting it asks for a fresh, empty pose
NEW_GESTURE = "New"

PARSE_ERROR_MESSAGE = "Failed to parse JSON file. Check format."


class GestureParseError(ValueError):
    """Gesture file contents are not a valid gesture table."""


@dataclass
class Gesture:
    """A named target pose."""
    name: str
    angles: Dict[str, Any]
    description: Optional[str] = None
    palm_displacement: Optional[List[Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "Gesture":
        if not isinstance(data, dict):
            raise GestureParseError(f"Gesture {name!r} is not an object")
        angles = data.get("angles")
        if not isinstance(angles, dict):
            raise GestureParseError(f"Gesture {name!r} has no 'angles' object")

        known = ("angles", "description", "palm_displacement")
        return cls(
            name=name,
            angles=dict(angles),
            description=data.get("description"),
            palm_displacement=data.get("palm_displacement"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict:
        d = {}
        if self.description is not None:
            d["description"] = self.description
        d["angles"] = dict(self.angles)
        if self.palm_displacement is not None:
            d["palm_displacement"] = self.palm_displacement
        d.update(self.extra)
        return d

    def target(self, shorthand: str) -> Optional[float]:
        """Valid target angle for a finger, or None if missing or invalid."""
        value = self.angles.get(shorthand)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return None
        if not ANGLE_MIN <= value <= ANGLE_MAX:
            return None
        return float(value)


def parse_gestures(text: Union[str, bytes]) -> Dict[str, Gesture]:
    """Parse gesture file contents. Raises GestureParseError."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise GestureParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GestureParseError("Gesture file must be a JSON object")

    return {name: Gesture.from_dict(name, entry) for name, entry in data.items()}


class GestureStore:
    """
    Gesture table plus the currently selected gesture.

    Applying pushes a pose into the actuator registry; saving captures
    the registry's current angles back into the table.
    """

    def __init__(self, registry: ActuatorRegistry):
        self.registry = registry
        self._gestures: Dict[str, Gesture] = {}
        self.current: Optional[str] = None

    def __len__(self):
        return len(self._gestures)

    def __contains__(self, name) -> bool:
        return name in self._gestures

    @property
    def names(self) -> List[str]:
        return list(self._gestures)

    def get(self, name: str) -> Optional[Gesture]:
        return self._gestures.get(name)

    def to_dict(self) -> dict:
        return {name: g.to_dict() for name, g in self._gestures.items()}

    # ----- Import / export -----

    def load(self, text: Union[str, bytes]) -> Optional[str]:
        """
        Replace the whole table with parsed file contents.

        On a parse error the table is left untouched and GestureParseError
        propagates. On success the first gesture is applied.

        Returns:
            Name of the applied gesture, or None if the file was empty
        """
        gestures = parse_gestures(text)
        self._gestures = gestures
        self.current = None
        logger.info("Loaded %d gestures", len(gestures))

        first = next(iter(gestures), None)
        if first is not None:
            self.apply(first)
        return first

    def load_file(self, path: Union[str, Path]) -> Optional[str]:
        path = Path(path)
        with open(path, "rb") as f:
            return self.load(f.read())

    def export(self) -> Optional[str]:
        """Serialize the table to JSON text, or None if empty."""
        if not self._gestures:
            return None
        return json.dumps(self.to_dict(), indent=2)

    def export_to_file(self, path: Union[str, Path] = "gestures.json") -> Optional[Path]:
        text = self.export()
        if text is None:
            return None
        path = Path(path)
        path.write_text(text)
        return path

    # ----- Pose operations -----

    def apply(self, name: str, new_name: Optional[str] = None,
              new_description: Optional[str] = None) -> bool:
        """
        Push a gesture's targets into the registry.

        The NEW_GESTURE sentinel instead creates and applies a fresh
        gesture called `new_name`. Fingers whose target is missing or
        outside [0, 180] are skipped; the rest are applied.

        Returns:
            True if a gesture was applied
        """
        if name == NEW_GESTURE:
            return self.create(new_name, new_description)

        gesture = self._gestures.get(name)
        if gesture is None:
            return False

        commands = {}
        for actuator in self.registry.snapshot:
            target = gesture.target(actuator.shorthand)
            if target is None:
                if actuator.shorthand in gesture.angles:
                    logger.warning("Invalid angle %r for actuator %d in gesture %r",
                                   gesture.angles[actuator.shorthand], actuator.id, name)
                continue
            commands[actuator.id] = command_from_angle(target)

        self.registry.apply_commands(commands)
        self.current = name
        return True

    def create(self, name: Optional[str], description: Optional[str]) -> bool:
        """Create a neutral gesture and apply it. Needs a name and description."""
        if not name or not description:
            return False

        self._gestures[name] = Gesture(
            name=name,
            description=description,
            angles={sh: ANGLE_NEUTRAL for sh in FINGER_SHORTHANDS},
            palm_displacement=[],
        )
        return self.apply(name)

    def save(self, name: str) -> bool:
        """Overwrite an existing gesture's angles with the current pose."""
        gesture = self._gestures.get(name)
        if gesture is None:
            return False

        gesture.angles = {a.shorthand: a.angle for a in self.registry.snapshot}
        return True

    def delete(self, name: str) -> bool:
        """Remove a gesture, then apply the first remaining one (or select New)."""
        if name not in self._gestures:
            return False

        del self._gestures[name]
        first = next(iter(self._gestures), None)
        if first is not None:
            self.apply(first)
        else:
            self.current = NEW_GESTURE
        return True
