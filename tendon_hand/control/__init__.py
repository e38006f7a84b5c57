"""Actuator state, safety monitoring, gestures, and the hand controller."""

from tendon_hand.control.registry import Actuator, ActuatorRegistry, RegistrySnapshot
from tendon_hand.control.safety import SafetyMonitor, SafetyWarning, WarningKind
from tendon_hand.control.gestures import (
    NEW_GESTURE,
    Gesture,
    GestureParseError,
    GestureStore,
    parse_gestures,
)
from tendon_hand.control.history import ActuatorSample, HandSample, SampleHistory
from tendon_hand.control.controller import HandController

__all__ = [
    "Actuator",
    "ActuatorRegistry",
    "RegistrySnapshot",
    "SafetyMonitor",
    "SafetyWarning",
    "WarningKind",
    "NEW_GESTURE",
    "Gesture",
    "GestureParseError",
    "GestureStore",
    "parse_gestures",
    "ActuatorSample",
    "HandSample",
    "SampleHistory",
    "HandController",
]
