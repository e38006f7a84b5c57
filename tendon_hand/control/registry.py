"""
Actuator registry - the hand's mutable state.

Every mutation publishes a new immutable RegistrySnapshot; readers
(safety monitor, sampler, UI) hold a snapshot and never see a half
written registry. Derived values (horn angle, tendon displacement,
joint angles) are computed from the commands, never stored on their own.
"""

import logging
import threading
from dataclasses import dataclass, replace
from functools import cached_property
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..config import (ACTUATOR_COLORS, ACTUATOR_NAMES, CMD_CENTER, FINGER_SHORTHANDS,
                      FINGERS)
from ..physics.actuation import angle_from_command, clamp_command
from ..physics.geometry import tendon_delta
from ..physics.solver import FingerJointState, solve_joints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actuator:
    """One flexor servo. The angle is always derived from the command."""
    id: int
    name: str
    color: str          # display only
    command: int        # pulse width (us)
    enabled: bool = True

    @property
    def angle(self) -> float:
        return angle_from_command(self.command)

    @property
    def tendon_delta(self) -> float:
        return tendon_delta(self.angle)

    @property
    def finger(self) -> str:
        return FINGERS[self.id]

    @property
    def shorthand(self) -> str:
        return FINGER_SHORTHANDS[self.id]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "command": self.command,
            "angle": self.angle,
            "enabled": self.enabled,
        }


def default_actuators() -> Tuple[Actuator, ...]:
    """The five flexors at neutral."""
    return tuple(
        Actuator(id=i, name=name, color=color, command=CMD_CENTER)
        for i, (name, color) in enumerate(zip(ACTUATOR_NAMES, ACTUATOR_COLORS))
    )


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of all actuators plus the system enable flag."""
    actuators: Tuple[Actuator, ...]
    enabled: bool = True
    version: int = 0

    def __iter__(self):
        return iter(self.actuators)

    def __len__(self):
        return len(self.actuators)

    def actuator(self, actuator_id: int) -> Optional[Actuator]:
        for a in self.actuators:
            if a.id == actuator_id:
                return a
        return None

    @property
    def commands(self) -> Tuple[int, ...]:
        return tuple(a.command for a in self.actuators)

    @property
    def angles(self) -> Tuple[float, ...]:
        return tuple(a.angle for a in self.actuators)

    @cached_property
    def joints(self) -> Dict[str, FingerJointState]:
        """Solved joint state per finger, memoized for this snapshot."""
        return {a.finger: solve_joints(a.tendon_delta, a.finger) for a in self.actuators}


class ActuatorRegistry:
    """
    Holds the current snapshot and replaces it on every mutation.

    Writers are serialized by a lock; readers just grab `snapshot`.
    """

    def __init__(self, actuators: Optional[Iterable[Actuator]] = None):
        self._lock = threading.Lock()
        self._snapshot = RegistrySnapshot(
            actuators=tuple(actuators) if actuators is not None else default_actuators()
        )

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    @property
    def enabled(self) -> bool:
        return self._snapshot.enabled

    def _publish(self, actuators: Tuple[Actuator, ...], enabled: bool) -> RegistrySnapshot:
        # Caller holds the lock
        self._snapshot = RegistrySnapshot(
            actuators=actuators,
            enabled=enabled,
            version=self._snapshot.version + 1,
        )
        return self._snapshot

    def set_command(self, actuator_id: int, value: float) -> bool:
        """
        Set one actuator's command.

        Rejected while the system is disabled or for an unknown id.
        Returns True if the registry changed.
        """
        with self._lock:
            current = self._snapshot
            if not current.enabled:
                logger.info("Ignoring command for actuator %s: system disabled", actuator_id)
                return False
            if current.actuator(actuator_id) is None:
                logger.warning("Ignoring command for unknown actuator %s", actuator_id)
                return False

            command = clamp_command(value)
            actuators = tuple(
                replace(a, command=command) if a.id == actuator_id else a
                for a in current.actuators
            )
            self._publish(actuators, current.enabled)
            return True

    def apply_commands(self, commands: Mapping[int, float]) -> RegistrySnapshot:
        """
        Set several commands in one replacement, regardless of the enable flag.

        Used for pose recall; ids not in `commands` keep their state.
        """
        with self._lock:
            current = self._snapshot
            actuators = tuple(
                replace(a, command=clamp_command(commands[a.id])) if a.id in commands else a
                for a in current.actuators
            )
            return self._publish(actuators, current.enabled)

    def set_enabled(self, enabled: bool) -> RegistrySnapshot:
        """Toggle the system enable flag without moving any actuator."""
        with self._lock:
            current = self._snapshot
            return self._publish(current.actuators, bool(enabled))

    def reset_neutral(self) -> RegistrySnapshot:
        """Force every actuator to neutral, even while disabled."""
        with self._lock:
            current = self._snapshot
            actuators = tuple(replace(a, command=CMD_CENTER) for a in current.actuators)
            return self._publish(actuators, current.enabled)

    def emergency_stop(self) -> RegistrySnapshot:
        """Disable the system and return to neutral in a single replacement."""
        with self._lock:
            current = self._snapshot
            actuators = tuple(replace(a, command=CMD_CENTER) for a in current.actuators)
            logger.warning("Emergency stop: system disabled, actuators at neutral")
            return self._publish(actuators, False)
