"""Bounded sample history for time-series plots."""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from .registry import RegistrySnapshot


@dataclass(frozen=True)
class ActuatorSample:
    id: int
    command: int
    angle: float
    tendon_delta: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "command": self.command,
            "angle": self.angle,
            "tendon_delta": self.tendon_delta,
        }


@dataclass(frozen=True)
class HandSample:
    """Immutable snapshot of the hand at one sampling instant."""
    timestamp_ms: float
    actuators: Tuple[ActuatorSample, ...]
    joints: Dict[str, Dict[str, float]]

    @classmethod
    def capture(cls, snapshot: RegistrySnapshot, timestamp_ms: float) -> "HandSample":
        return cls(
            timestamp_ms=timestamp_ms,
            actuators=tuple(
                ActuatorSample(a.id, a.command, a.angle, float(a.tendon_delta))
                for a in snapshot.actuators
            ),
            joints={finger: state.to_dict() for finger, state in snapshot.joints.items()},
        )

    def to_dict(self) -> dict:
        return {
            "timestamp_ms": self.timestamp_ms,
            "actuators": [a.to_dict() for a in self.actuators],
            "joints": {finger: dict(angles) for finger, angles in self.joints.items()},
        }


class SampleHistory:
    """Sliding window of the most recent samples, oldest first."""

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._samples = deque(maxlen=capacity)

    def __len__(self):
        return len(self._samples)

    def append(self, sample: HandSample) -> None:
        self._samples.append(sample)

    def samples(self) -> List[HandSample]:
        return list(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def timestamps(self) -> np.ndarray:
        return np.array([s.timestamp_ms for s in self._samples], dtype=np.float64)

    def actuator_series(self, key: str) -> np.ndarray:
        """
        (N, num_actuators) array of one actuator field.

        Args:
            key: 'command', 'angle', or 'tendon_delta'
        """
        if key not in ("command", "angle", "tendon_delta"):
            raise ValueError(f"Unknown actuator field {key!r}")
        if not self._samples:
            return np.zeros((0, 0), dtype=np.float64)
        return np.array(
            [[getattr(a, key) for a in s.actuators] for s in self._samples],
            dtype=np.float64,
        )

    def joint_series(self, finger: str, joint: str) -> np.ndarray:
        return np.array([s.joints[finger][joint] for s in self._samples], dtype=np.float64)
