"""
Tendon Hand Physics Package

Pure transfer functions of the actuation chain:

    command (us) → horn angle (deg) → tendon displacement (mm) → joint angles (deg)

Modules:
- actuation: Servo command ↔ horn angle
- geometry: Pulley arc length
- solver: Underactuated tendon → joint coupling per finger
- analysis: Transfer-curve sweeps
"""

from .actuation import angle_from_command, command_from_angle, clamp_command
from .geometry import tendon_delta
from .solver import (FingerJointState, FingerCoupling, ThumbCoupling, FourJointCoupling,
                     JointSegment, coupling_for, flexion_ratio, solve_joints)
from .analysis import (command_angle_curve, angle_tendon_curve, tendon_joint_curves,
                       engagement_onsets)

__all__ = [
    # Actuation
    'angle_from_command', 'command_from_angle', 'clamp_command',
    # Geometry
    'tendon_delta',
    # Solver
    'FingerJointState', 'FingerCoupling', 'ThumbCoupling', 'FourJointCoupling',
    'JointSegment', 'coupling_for', 'flexion_ratio', 'solve_joints',
    # Analysis
    'command_angle_curve', 'angle_tendon_curve', 'tendon_joint_curves',
    'engagement_onsets',
]
