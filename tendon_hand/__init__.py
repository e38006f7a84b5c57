"""Tendon-driven robotic hand: actuation chain, safety monitoring, and gestures."""

from tendon_hand.config import HandConfig, SafetyConfig, load_config
from tendon_hand.control import HandController

__version__ = "0.1.0"

__all__ = ["HandConfig", "SafetyConfig", "load_config", "HandController"]
