"""
Solver Module - Underactuated tendon coupling.

One tendon drives every joint of a finger. The joints do not move
together: the most compliant joint engages first and the stiffer ones
only once the tendon has been pulled further. Each finger type is one
coupling variant:

    ThumbCoupling      MCP, IP        both engage from rest
    FourJointCoupling  PIP, DIP, MCP  engage at r = 0, 0.25, 0.6

where r = |ΔL| / MAX_DISPLACEMENT_MM is the flexion ratio. Every joint
is its own clamped linear segment of r; no joint reads another.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from ..config import FINGERS, MAX_DISPLACEMENT_MM


@dataclass(frozen=True)
class JointSegment:
    """Clamped linear segment: angle = clip((r - onset) · gain, 0, max)."""
    onset: float     # flexion ratio where the joint starts to move
    gain: float      # degrees per unit ratio once engaged
    max_angle: float

    def angle(self, ratio: float) -> float:
        return float(np.clip((ratio - self.onset) * self.gain, 0.0, self.max_angle))


@dataclass(frozen=True)
class FingerJointState:
    """Solved joint angles of one finger (degrees), with static limits."""
    finger: str
    angles: Dict[str, float]
    limits: Dict[str, Tuple[float, float]]

    def __getitem__(self, joint: str) -> float:
        return self.angles[joint]

    @property
    def joint_names(self) -> Tuple[str, ...]:
        return tuple(self.angles)

    def to_dict(self) -> dict:
        return dict(self.angles)


class FingerCoupling:
    """Base for the tendon → joint coupling variants."""

    # Joint name → segment, in engagement order
    segments: Dict[str, JointSegment] = {}
    # Joint name → physical range (deg), in anatomical order
    limits: Dict[str, Tuple[float, float]] = {}

    @property
    def joint_names(self) -> Tuple[str, ...]:
        return tuple(self.limits)

    def solve(self, ratio: float) -> Dict[str, float]:
        """Joint angles for a flexion ratio, in anatomical order."""
        return {name: self.segments[name].angle(ratio) for name in self.joint_names}


class ThumbCoupling(FingerCoupling):
    """Two-joint thumb: MCP and IP flex proportionally from rest."""

    segments = {
        "mcp": JointSegment(onset=0.0, gain=90.0, max_angle=90.0),
        "ip": JointSegment(onset=0.0, gain=80.0, max_angle=80.0),
    }
    limits = {
        "mcp": (0.0, 90.0),
        "ip": (0.0, 80.0),
    }


class FourJointCoupling(FingerCoupling):
    """
    Three-joint finger with sequential engagement PIP → DIP → MCP.

    The order encodes the compliance hierarchy of the finger and must
    not change.
    """

    segments = {
        "pip": JointSegment(onset=0.0, gain=100.0, max_angle=100.0),
        "dip": JointSegment(onset=0.25, gain=120.0, max_angle=90.0),
        "mcp": JointSegment(onset=0.6, gain=225.0, max_angle=90.0),
    }
    limits = {
        "mcp": (0.0, 90.0),
        "pip": (0.0, 100.0),
        "dip": (0.0, 90.0),
    }


THUMB = ThumbCoupling()
FOUR_JOINT = FourJointCoupling()

COUPLINGS: Dict[str, FingerCoupling] = {
    "thumb": THUMB,
    "index": FOUR_JOINT,
    "middle": FOUR_JOINT,
    "ring": FOUR_JOINT,
    "pinky": FOUR_JOINT,
}


def coupling_for(finger: str) -> FingerCoupling:
    """Coupling variant for a finger name."""
    try:
        return COUPLINGS[finger]
    except KeyError:
        raise ValueError(f"Unknown finger {finger!r}, expected one of {FINGERS}") from None


def flexion_ratio(delta_mm: float) -> float:
    """Normalized flexion r = |ΔL| / MAX_DISPLACEMENT_MM."""
    return abs(delta_mm) / MAX_DISPLACEMENT_MM


def solve_joints(delta_mm: float, finger: str) -> FingerJointState:
    """
    Solve a finger's joint angles from its tendon displacement.

    Args:
        delta_mm: Signed tendon displacement from neutral (mm)
        finger: One of FINGERS

    Returns:
        FingerJointState with angles clamped to each joint's range
    """
    coupling = coupling_for(finger)
    return FingerJointState(
        finger=finger,
        angles=coupling.solve(flexion_ratio(delta_mm)),
        limits=dict(coupling.limits),
    )
