"""
Hand configuration: physical constants and runtime tunables.

Physical constants describe the servo and pulley hardware and are fixed.
Runtime tunables (tick rates, history size, safety bands) live in
dataclasses and can be loaded from a JSON file.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Union

# Servo command range (pulse width, microseconds)
CMD_MIN = 500
CMD_MAX = 2500
CMD_CENTER = 1500

# Servo horn angle range (degrees)
ANGLE_MIN = 0.0
ANGLE_MAX = 180.0
ANGLE_NEUTRAL = 90.0

# Tendon pulley on the servo horn
PULLEY_RADIUS_MM = 10.0
# ~pi/2 * 10mm, rounded up so full flexion needs the whole 90° of travel
MAX_DISPLACEMENT_MM = 16.0

# Fixed actuator order; index == actuator id
FINGERS = ("thumb", "index", "middle", "ring", "pinky")
FINGER_SHORTHANDS = ("TH", "IN", "MI", "RI", "PI")

ACTUATOR_NAMES = (
    "Thumb Flexor",
    "Index Flexor",
    "Middle Flexor",
    "Ring Flexor",
    "Pinky Flexor",
)
ACTUATOR_COLORS = ("#ef4444", "#f59e0b", "#10b981", "#3b82f6", "#8b5cf6")


@dataclass
class SafetyConfig:
    """Thresholds used by the safety monitor."""

    near_limit_margin: int = 50       # command units from either end
    high_load_margin: int = 100       # command units from either end
    stall_threshold_ms: float = 2000.0
    overtravel_tolerance_deg: float = 5.0

    def __post_init__(self):
        if self.near_limit_margin < 0 or self.high_load_margin < 0:
            raise ValueError("Safety margins must be non-negative")
        if self.stall_threshold_ms < 0:
            raise ValueError("stall_threshold_ms must be non-negative")
        if self.overtravel_tolerance_deg < 0:
            raise ValueError("overtravel_tolerance_deg must be non-negative")

    def to_dict(self) -> dict:
        return {
            "near_limit_margin": self.near_limit_margin,
            "high_load_margin": self.high_load_margin,
            "stall_threshold_ms": self.stall_threshold_ms,
            "overtravel_tolerance_deg": self.overtravel_tolerance_deg,
        }


@dataclass
class HandConfig:
    """Configuration for the hand controller."""

    # Periodic tasks
    safety_rate_hz: float = 20.0
    sample_rate_hz: float = 10.0

    # Sliding window of samples kept for plotting
    history_capacity: int = 100

    safety: SafetyConfig = field(default_factory=SafetyConfig)

    def __post_init__(self):
        if self.safety_rate_hz <= 0 or self.sample_rate_hz <= 0:
            raise ValueError("Tick rates must be positive")
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")

    @property
    def safety_period_s(self) -> float:
        return 1.0 / self.safety_rate_hz

    @property
    def sample_period_s(self) -> float:
        return 1.0 / self.sample_rate_hz

    def to_dict(self) -> dict:
        return {
            "safety_rate_hz": self.safety_rate_hz,
            "sample_rate_hz": self.sample_rate_hz,
            "history_capacity": self.history_capacity,
            "safety": self.safety.to_dict(),
        }


def _check_keys(data: dict, cls) -> None:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")


def config_from_dict(data: dict) -> HandConfig:
    """Build a HandConfig from a (possibly partial) dict."""
    data = dict(data)
    _check_keys(data, HandConfig)

    safety_data = data.pop("safety", {}) or {}
    _check_keys(safety_data, SafetyConfig)

    return HandConfig(safety=SafetyConfig(**safety_data), **data)


def load_config(path: Union[str, Path]) -> HandConfig:
    """Load a HandConfig from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {path}")

    return config_from_dict(data)
