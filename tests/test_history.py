"""Tests for the bounded sample history."""

import numpy as np
import pytest

from tendon_hand.control.history import HandSample, SampleHistory
from tendon_hand.control.registry import ActuatorRegistry


def test_capture_neutral():
    sample = HandSample.capture(ActuatorRegistry().snapshot, timestamp_ms=1000)
    assert sample.timestamp_ms == 1000
    assert [a.command for a in sample.actuators] == [1500] * 5
    assert all(a.tendon_delta == 0 for a in sample.actuators)
    assert sample.joints["thumb"] == {"mcp": 0.0, "ip": 0.0}


def test_sample_is_independent_of_later_commands():
    registry = ActuatorRegistry()
    sample = HandSample.capture(registry.snapshot, timestamp_ms=0)
    registry.set_command(1, 2500)
    assert sample.actuators[1].command == 1500
    assert sample.joints["index"]["pip"] == 0.0


def test_sliding_window():
    registry = ActuatorRegistry()
    history = SampleHistory(capacity=100)
    for i in range(150):
        history.append(HandSample.capture(registry.snapshot, timestamp_ms=i * 100))

    assert len(history) == 100
    np.testing.assert_array_equal(history.timestamps(), np.arange(50, 150) * 100)
    assert history.samples()[0].timestamp_ms == 5000


def test_series():
    registry = ActuatorRegistry()
    history = SampleHistory()
    history.append(HandSample.capture(registry.snapshot, timestamp_ms=0))
    registry.set_command(2, 2500)
    history.append(HandSample.capture(registry.snapshot, timestamp_ms=100))

    commands = history.actuator_series("command")
    assert commands.shape == (2, 5)
    assert commands[1, 2] == 2500
    assert history.joint_series("middle", "pip")[0] == 0.0
    assert history.joint_series("middle", "pip")[1] > 0.0

    with pytest.raises(ValueError):
        history.actuator_series("color")


def test_clear():
    history = SampleHistory()
    history.append(HandSample.capture(ActuatorRegistry().snapshot, timestamp_ms=0))
    history.clear()
    assert len(history) == 0
    assert history.actuator_series("angle").shape == (0, 0)


def test_invalid_capacity():
    with pytest.raises(ValueError):
        SampleHistory(capacity=0)
