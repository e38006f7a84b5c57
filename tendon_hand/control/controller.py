"""
Hand controller - command interface and observable outputs.

Ties the actuator registry, safety monitor, gesture store, and sample
history together and runs the two periodic tasks:

    safety   recompute warnings from the latest registry snapshot
    sampler  append a HandSample to the bounded history (10 Hz)

Usage:
    hand = HandController()
    hand.set_command(1, 2000)
    hand.tick_safety()
    print(hand.warnings)

    with HandController() as hand:   # periodic tasks run in background
        ...
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..config import HandConfig
from ..physics.solver import FingerJointState
from .gestures import PARSE_ERROR_MESSAGE, GestureParseError, GestureStore
from .history import HandSample, SampleHistory
from .registry import Actuator, ActuatorRegistry, RegistrySnapshot
from .safety import SafetyMonitor, SafetyWarning

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class PeriodicTask:
    """Runs `fn` every `period_s` seconds on a daemon thread until stopped."""

    def __init__(self, name: str, period_s: float, fn: Callable[[], None],
                 stop_event: threading.Event):
        self.name = name
        self.period_s = period_s
        self._fn = fn
        self._stop_event = stop_event
        self._thread: Optional[threading.Thread] = None

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()

    def join(self, timeout: float = 2.0):
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None

    def _loop(self):
        next_run = time.monotonic()
        while not self._stop_event.is_set():
            try:
                self._fn()
            except Exception:
                logger.exception("%s task failed", self.name)
            next_run += self.period_s
            self._stop_event.wait(max(0.0, next_run - time.monotonic()))


class HandController:
    """Owns the hand's state and exposes the actuation command interface."""

    def __init__(self, config: Optional[HandConfig] = None,
                 clock: Callable[[], float] = monotonic_ms):
        self.config = config or HandConfig()
        self.clock = clock

        self.registry = ActuatorRegistry()
        self.monitor = SafetyMonitor(self.config.safety)
        self.gestures = GestureStore(self.registry)
        self.history = SampleHistory(self.config.history_capacity)

        self._warnings: List[SafetyWarning] = []
        self._notices: List[str] = []

        self._stop_event = threading.Event()
        self._tasks: List[PeriodicTask] = []

    # ----- Command interface -----

    def set_command(self, actuator_id: int, value: int) -> bool:
        return self.registry.set_command(actuator_id, value)

    def set_enabled(self, enabled: bool) -> None:
        self.registry.set_enabled(enabled)

    def reset_neutral(self) -> None:
        self.registry.reset_neutral()
        self.monitor.clear_load_timestamps()

    def emergency_stop(self) -> None:
        self.registry.emergency_stop()
        self.monitor.clear_load_timestamps()

    # ----- Gestures -----

    def import_gestures(self, text: Union[str, bytes]) -> bool:
        """Load a gesture file's contents. Parse errors become a notice."""
        try:
            self.gestures.load(text)
        except GestureParseError as e:
            logger.warning("Gesture import failed: %s", e)
            self._notices.append(PARSE_ERROR_MESSAGE)
            return False
        return True

    def import_gestures_file(self, path: Union[str, Path]) -> bool:
        with open(path, "rb") as f:
            return self.import_gestures(f.read())

    def apply_gesture(self, name: str, new_name: Optional[str] = None,
                      new_description: Optional[str] = None) -> bool:
        return self.gestures.apply(name, new_name, new_description)

    def save_gesture(self, name: str) -> bool:
        return self.gestures.save(name)

    def delete_gesture(self, name: str) -> bool:
        return self.gestures.delete(name)

    def export_gestures(self) -> Optional[str]:
        return self.gestures.export()

    def export_gestures_file(self, path: Union[str, Path] = "gestures.json") -> Optional[Path]:
        return self.gestures.export_to_file(path)

    # ----- Observable outputs -----

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self.registry.snapshot

    @property
    def enabled(self) -> bool:
        return self.registry.enabled

    @property
    def actuators(self) -> List[Actuator]:
        return list(self.registry.snapshot.actuators)

    @property
    def joints(self) -> Dict[str, FingerJointState]:
        return self.registry.snapshot.joints

    @property
    def warnings(self) -> List[SafetyWarning]:
        return list(self._warnings)

    @property
    def notices(self) -> List[str]:
        return list(self._notices)

    def clear_notices(self) -> None:
        self._notices = []

    @property
    def current_gesture(self) -> Optional[str]:
        return self.gestures.current

    @property
    def gesture_table(self) -> dict:
        return self.gestures.to_dict()

    def clear_history(self) -> None:
        self.history.clear()

    # ----- Periodic work -----

    def tick_safety(self, now_ms: Optional[float] = None) -> List[SafetyWarning]:
        """Run one safety evaluation and replace the warning list."""
        now_ms = self.clock() if now_ms is None else now_ms
        self._warnings = self.monitor.evaluate(self.registry.snapshot, now_ms)
        return self.warnings

    def tick_sample(self, now_ms: Optional[float] = None) -> HandSample:
        """Append one sample of the current state to the history."""
        now_ms = self.clock() if now_ms is None else now_ms
        sample = HandSample.capture(self.registry.snapshot, now_ms)
        self.history.append(sample)
        return sample

    @property
    def running(self) -> bool:
        return any(t.alive for t in self._tasks)

    def start(self):
        """Start the safety and sampler tasks. No-op if already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._tasks = [
            PeriodicTask("safety", self.config.safety_period_s, self.tick_safety,
                         self._stop_event),
            PeriodicTask("sampler", self.config.sample_period_s, self.tick_sample,
                         self._stop_event),
        ]
        for task in self._tasks:
            task.start()
        logger.info("Hand controller started (safety %.0f Hz, sampler %.0f Hz)",
                    self.config.safety_rate_hz, self.config.sample_rate_hz)

    def stop(self):
        """Stop both periodic tasks together."""
        self._stop_event.set()
        for task in self._tasks:
            task.join()
        self._tasks = []
        logger.info("Hand controller stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
