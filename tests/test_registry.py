"""Tests for the actuator registry."""

import pytest

from tendon_hand.control.registry import ActuatorRegistry


@pytest.fixture
def registry():
    return ActuatorRegistry()


def test_default_actuators(registry):
    snap = registry.snapshot
    assert len(snap) == 5
    assert [a.name for a in snap] == [
        "Thumb Flexor", "Index Flexor", "Middle Flexor", "Ring Flexor", "Pinky Flexor",
    ]
    assert snap.commands == (1500,) * 5
    assert snap.angles == (90.0,) * 5
    assert snap.enabled


def test_set_command_touches_one_actuator(registry):
    assert registry.set_command(2, 2000)
    snap = registry.snapshot
    assert snap.commands == (1500, 1500, 2000, 1500, 1500)
    assert snap.actuator(2).angle == pytest.approx(135.0)


def test_snapshots_are_copy_on_write(registry):
    before = registry.snapshot
    registry.set_command(0, 800)
    after = registry.snapshot
    assert before is not after
    assert before.commands[0] == 1500
    assert after.version == before.version + 1


def test_set_command_clamps(registry):
    registry.set_command(4, 9000)
    assert registry.snapshot.actuator(4).command == 2500


def test_unknown_id_is_noop(registry):
    before = registry.snapshot
    assert not registry.set_command(7, 1000)
    assert registry.snapshot is before


def test_disabled_rejects_commands(registry):
    registry.set_enabled(False)
    assert not registry.set_command(1, 2000)
    assert registry.snapshot.commands == (1500,) * 5


def test_disable_does_not_move(registry):
    registry.set_command(1, 2100)
    registry.set_enabled(False)
    assert registry.snapshot.commands[1] == 2100
    assert not registry.enabled


def test_reset_neutral_while_disabled(registry):
    registry.set_command(3, 600)
    registry.set_enabled(False)
    registry.reset_neutral()
    snap = registry.snapshot
    assert snap.commands == (1500,) * 5
    assert not snap.enabled


@pytest.mark.parametrize("enabled", [True, False])
def test_emergency_stop(registry, enabled):
    registry.set_command(0, 2400)
    registry.set_command(1, 520)
    registry.set_enabled(enabled)
    registry.emergency_stop()
    snap = registry.snapshot
    assert snap.commands == (1500,) * 5
    assert snap.angles == (90.0,) * 5
    assert not snap.enabled


def test_apply_commands_ignores_enable_flag(registry):
    registry.set_enabled(False)
    registry.apply_commands({1: 1833, 3: 2500})
    assert registry.snapshot.commands == (1500, 1833, 1500, 2500, 1500)


def test_joints_derived_from_commands(registry):
    registry.set_command(1, 2500)
    joints = registry.snapshot.joints
    assert joints["index"].angles["pip"] > 0
    assert joints["middle"].angles == {"mcp": 0.0, "pip": 0.0, "dip": 0.0}
    assert registry.snapshot.joints is joints
