"""
Analysis Module - Transfer-curve sweeps.

Samples each stage of the actuation chain over its input range so the
curves can be tabulated or plotted:
- command → horn angle
- horn angle → tendon displacement
- tendon displacement → joint angles, per finger
"""

from typing import Dict, Tuple

import numpy as np

from ..config import ANGLE_MAX, ANGLE_MIN, CMD_MAX, CMD_MIN
from .actuation import angle_from_command
from .geometry import tendon_delta
from .solver import coupling_for, flexion_ratio


def command_angle_curve(step: int = 20) -> Tuple[np.ndarray, np.ndarray]:
    """Commands CMD_MIN..CMD_MAX (inclusive) and their horn angles."""
    commands = np.arange(CMD_MIN, CMD_MAX + 1, step)
    angles = np.array([angle_from_command(c) for c in commands])
    return commands, angles


def angle_tendon_curve(step: float = 2.0) -> Tuple[np.ndarray, np.ndarray]:
    """Horn angles ANGLE_MIN..ANGLE_MAX (inclusive) and tendon displacements."""
    n = int(round((ANGLE_MAX - ANGLE_MIN) / step)) + 1
    angles = np.linspace(ANGLE_MIN, ANGLE_MAX, n)
    deltas = np.array([tendon_delta(a) for a in angles])
    return angles, deltas


def tendon_joint_curves(finger: str, start: float = -20.0, stop: float = 20.0,
                        step: float = 0.5) -> Dict[str, np.ndarray]:
    """
    Joint angles of one finger across a tendon displacement sweep.

    Returns:
        Dict with 'delta' (mm) and one array per joint (deg)
    """
    coupling = coupling_for(finger)
    n = int(round((stop - start) / step)) + 1
    deltas = np.linspace(start, stop, n)

    curves = {'delta': deltas}
    for name in coupling.joint_names:
        curves[name] = np.empty(n)

    for i, d in enumerate(deltas):
        solved = coupling.solve(flexion_ratio(d))
        for name, angle in solved.items():
            curves[name][i] = angle

    return curves


def engagement_onsets(finger: str, n_points: int = 1001) -> Dict[str, float]:
    """
    Smallest flexion ratio in [0, 1] at which each joint leaves zero.

    Joints that never move within the sweep map to NaN.
    """
    coupling = coupling_for(finger)
    ratios = np.linspace(0.0, 1.0, n_points)
    onsets = {}
    for name in coupling.joint_names:
        moving = np.array([coupling.segments[name].angle(r) > 0 for r in ratios])
        onsets[name] = float(ratios[np.argmax(moving)]) if moving.any() else float('nan')
    return onsets
