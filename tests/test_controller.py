"""
Integration tests for the hand controller.

Covers the command interface, gesture import through the controller,
warning replacement, config loading, and the threaded periodic tasks.
"""

import json
import time

import pytest

from tendon_hand.config import HandConfig, SafetyConfig, load_config
from tendon_hand.control import HandController, WarningKind
from tendon_hand.control.gestures import NEW_GESTURE, PARSE_ERROR_MESSAGE

FIST = '{"Fist":{"angles":{"TH":80,"IN":120,"MI":120,"RI":120,"PI":120}}}'


@pytest.fixture
def hand():
    return HandController()


class TestCommands:
    def test_emergency_stop_from_any_state(self, hand):
        hand.set_command(0, 520)
        hand.set_command(3, 2480)
        hand.tick_safety(now_ms=0)
        hand.emergency_stop()
        assert [a.command for a in hand.actuators] == [1500] * 5
        assert [a.angle for a in hand.actuators] == [90.0] * 5
        assert not hand.enabled
        assert hand.monitor.load_timestamps == {}

    def test_disable_keeps_pose(self, hand):
        hand.set_command(2, 1900)
        hand.set_enabled(False)
        assert hand.actuators[2].command == 1900
        assert not hand.set_command(2, 1000)
        hand.set_enabled(True)
        assert hand.set_command(2, 1000)

    def test_reset_clears_load_timestamps(self, hand):
        hand.set_command(1, 520)
        hand.tick_safety(now_ms=0)
        hand.reset_neutral()
        assert hand.monitor.load_timestamps == {}
        assert hand.actuators[1].command == 1500

    def test_joints_follow_commands(self, hand):
        hand.set_command(1, 2500)
        assert hand.joints["index"]["pip"] > 0
        hand.emergency_stop()
        assert hand.joints["index"]["pip"] == 0.0


class TestWarnings:
    def test_stall_scenario(self, hand):
        hand.tick_safety(now_ms=0)
        hand.set_command(0, 520)
        hand.tick_safety(now_ms=1000)
        warnings = hand.tick_safety(now_ms=2100)
        assert WarningKind.STALL_RISK in [w.kind for w in warnings]

        hand.set_command(0, 1500)
        hand.tick_safety(now_ms=2200)
        assert hand.warnings == []

    def test_warnings_replaced_each_tick(self, hand):
        hand.set_command(4, 2500)
        assert len(hand.tick_safety(now_ms=0)) == 1
        hand.set_command(4, 1500)
        assert hand.tick_safety(now_ms=100) == []

    def test_clock_injection(self):
        hand = HandController(clock=lambda: 42.0)
        assert hand.tick_sample().timestamp_ms == 42.0


class TestGestures:
    def test_import_fist(self, hand):
        assert hand.import_gestures(FIST)
        assert hand.current_gesture == "Fist"
        assert hand.actuators[1].command == 1833
        assert hand.gesture_table == json.loads(FIST)

    def test_parse_failure_becomes_notice(self, hand):
        hand.import_gestures(FIST)
        assert not hand.import_gestures("{broken")
        assert hand.notices == [PARSE_ERROR_MESSAGE]
        assert hand.current_gesture == "Fist"

        # Notices survive safety ticks
        hand.tick_safety(now_ms=0)
        assert hand.notices == [PARSE_ERROR_MESSAGE]
        hand.clear_notices()
        assert hand.notices == []

    def test_delete_only_gesture(self, hand):
        hand.import_gestures(FIST)
        hand.delete_gesture("Fist")
        assert hand.gesture_table == {}
        assert hand.current_gesture == NEW_GESTURE
        assert hand.export_gestures() is None

    def test_file_round_trip(self, hand, tmp_path):
        src = tmp_path / "in.json"
        src.write_text(FIST)
        assert hand.import_gestures_file(src)
        hand.set_command(2, 500)
        hand.save_gesture("Fist")
        out = hand.export_gestures_file(tmp_path / "out.json")
        assert json.loads(out.read_text())["Fist"]["angles"]["MI"] == 0.0


class TestHistory:
    def test_history_bounded(self, hand):
        for i in range(150):
            hand.tick_sample(now_ms=i * 100)
        samples = hand.history.samples()
        assert len(samples) == 100
        assert samples[0].timestamp_ms == 5000
        assert samples[-1].timestamp_ms == 14900

    def test_clear_history(self, hand):
        hand.tick_sample(now_ms=0)
        hand.clear_history()
        assert len(hand.history) == 0


class TestPeriodicTasks:
    def test_start_stop(self):
        config = HandConfig(safety_rate_hz=100, sample_rate_hz=100)
        with HandController(config) as hand:
            assert hand.running
            hand.start()  # second start is a no-op
            hand.set_command(1, 2500)
            time.sleep(0.3)
        assert not hand.running
        assert len(hand.history) > 0
        assert any(w.kind == WarningKind.NEAR_MAX for w in hand.warnings)


class TestConfig:
    def test_defaults(self):
        config = HandConfig()
        assert config.sample_rate_hz == 10
        assert config.history_capacity == 100
        assert config.safety.stall_threshold_ms == 2000
        assert config.safety.overtravel_tolerance_deg == 5

    def test_load(self, tmp_path):
        path = tmp_path / "hand.json"
        path.write_text(json.dumps({"sample_rate_hz": 5, "safety": {"stall_threshold_ms": 500}}))
        config = load_config(path)
        assert config.sample_rate_hz == 5
        assert config.sample_period_s == pytest.approx(0.2)
        assert config.safety.stall_threshold_ms == 500
        assert config.safety.near_limit_margin == 50

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "hand.json"
        path.write_text(json.dumps({"safety": {"bogus": 1}}))
        with pytest.raises(ValueError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            HandConfig(sample_rate_hz=0)
        with pytest.raises(ValueError):
            SafetyConfig(near_limit_margin=-1)

    def test_capacity_from_config(self):
        hand = HandController(HandConfig(history_capacity=3))
        for i in range(5):
            hand.tick_sample(now_ms=i)
        assert len(hand.history) == 3
