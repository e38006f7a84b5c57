"""
Geometry Module - Pulley arc length.

The flexor tendon wraps a pulley on the servo horn. Rotating the horn
away from neutral (90°) reels tendon in or out by the arc length.
All units: mm, degrees.
"""

import numpy as np

from ..config import ANGLE_NEUTRAL, PULLEY_RADIUS_MM


def tendon_delta(angle: float, pulley_radius: float = PULLEY_RADIUS_MM) -> float:
    """
    Signed tendon displacement (mm) relative to the neutral pose.

    ΔL = r · (θ - 90°) · π/180, positive when θ > 90°.
    """
    return pulley_radius * np.radians(angle - ANGLE_NEUTRAL)
