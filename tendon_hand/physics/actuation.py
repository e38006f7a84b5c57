"""
Actuation Module - Servo command to horn angle.

Linear pulse-width model of a hobby servo: 500us → 0°, 2500us → 180°.
"""

import numpy as np

from ..config import ANGLE_MAX, ANGLE_MIN, CMD_MAX, CMD_MIN


def angle_from_command(command: float) -> float:
    """
    Servo horn angle (deg) for a pulse-width command (us).

    No clamping: callers constrain the command to [CMD_MIN, CMD_MAX].
    """
    return (command - CMD_MIN) / (CMD_MAX - CMD_MIN) * (ANGLE_MAX - ANGLE_MIN)


def command_from_angle(angle: float) -> int:
    """Inverse of angle_from_command, rounded half-up to a whole microsecond."""
    return int(np.floor(angle / ANGLE_MAX * (CMD_MAX - CMD_MIN) + CMD_MIN + 0.5))


def clamp_command(command: float) -> int:
    """Constrain a command to the servo's valid range."""
    return int(np.clip(round(command), CMD_MIN, CMD_MAX))
