"""
Safety monitoring for the tendon hand.

Evaluated once per control tick over a registry snapshot. Every
evaluation returns the complete warning list; nothing carries over
between ticks. Warnings are advisory only and never block actuation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from ..config import CMD_MAX, CMD_MIN, SafetyConfig
from ..physics.solver import FingerJointState
from .registry import Actuator, RegistrySnapshot


class WarningKind(str, Enum):
    NEAR_MIN = "near_min"
    NEAR_MAX = "near_max"
    STALL_RISK = "stall_risk"
    OVER_TRAVEL = "over_travel"


@dataclass(frozen=True)
class SafetyWarning:
    """One advisory classification from a safety evaluation."""
    kind: WarningKind
    subject: Union[int, str]  # actuator id, or "finger.joint"
    message: str

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "subject": self.subject, "message": self.message}


class SafetyMonitor:
    """
    Classifies limit proximity, stall risk, and joint over-travel.

    Stall detection keeps one timestamp per actuator: refreshed to `now`
    on every tick the actuator is outside the high-load band, left alone
    while inside it. Time in band is therefore `now - timestamp`.
    """

    def __init__(self, config: Optional[SafetyConfig] = None):
        self.config = config or SafetyConfig()
        self._load_timestamps: Dict[int, float] = {}

    @property
    def load_timestamps(self) -> Dict[int, float]:
        return dict(self._load_timestamps)

    def clear_load_timestamps(self) -> None:
        self._load_timestamps.clear()

    def in_high_load_band(self, command: int) -> bool:
        margin = self.config.high_load_margin
        return command < CMD_MIN + margin or command > CMD_MAX - margin

    def _check_actuator(self, actuator: Actuator, now_ms: float) -> List[SafetyWarning]:
        warnings = []
        margin = self.config.near_limit_margin

        if actuator.command <= CMD_MIN + margin:
            warnings.append(SafetyWarning(
                WarningKind.NEAR_MIN, actuator.id,
                f"{actuator.name}: PWM near minimum limit",
            ))
        if actuator.command >= CMD_MAX - margin:
            warnings.append(SafetyWarning(
                WarningKind.NEAR_MAX, actuator.id,
                f"{actuator.name}: PWM near maximum limit",
            ))

        if self.in_high_load_band(actuator.command):
            entered = self._load_timestamps.setdefault(actuator.id, now_ms)
            if now_ms - entered > self.config.stall_threshold_ms:
                warnings.append(SafetyWarning(
                    WarningKind.STALL_RISK, actuator.id,
                    f"{actuator.name}: High load duration - stall risk!",
                ))
        else:
            self._load_timestamps[actuator.id] = now_ms

        return warnings

    def check_joints(self, joints: Dict[str, FingerJointState]) -> List[SafetyWarning]:
        """Flag joints outside their limits by more than the tolerance."""
        warnings = []
        tol = self.config.overtravel_tolerance_deg

        for finger, state in joints.items():
            for joint, angle in state.angles.items():
                lo, hi = state.limits[joint]
                if angle < lo - tol or angle > hi + tol:
                    warnings.append(SafetyWarning(
                        WarningKind.OVER_TRAVEL, f"{finger}.{joint}",
                        f"{finger} {joint.upper()}: Over-travel detected",
                    ))

        return warnings

    def evaluate(self, snapshot: RegistrySnapshot, now_ms: float) -> List[SafetyWarning]:
        """
        Run one safety evaluation.

        Args:
            snapshot: Registry state to evaluate
            now_ms: Current time (ms) on a monotonic clock

        Returns:
            Complete warning list for this tick
        """
        warnings = []
        for actuator in snapshot.actuators:
            warnings.extend(self._check_actuator(actuator, now_ms))
        warnings.extend(self.check_joints(snapshot.joints))
        return warnings
