"""
Gesture simulation script.

Loads a gesture file, applies a gesture, and steps the safety monitor and
sampler in simulated time.

Usage:
    tendon-hand-sim --gestures gestures.json
    tendon-hand-sim --gestures gestures.json --gesture Fist --ticks 30
    tendon-hand-sim --gestures gestures.json --export out.json
"""

import argparse
import logging
import sys
from pathlib import Path

from tendon_hand.__main__ import print_hand_state
from tendon_hand.config import HandConfig, load_config
from tendon_hand.control import HandController


def main():
    parser = argparse.ArgumentParser(description="Simulate gestures on the tendon hand")
    parser.add_argument("--gestures", required=True, help="Gesture JSON file")
    parser.add_argument("--gesture", help="Gesture to apply (default: first in file)")
    parser.add_argument("--ticks", type=int, default=10, help="Simulated ticks at the sample rate")
    parser.add_argument("--export", help="Write the gesture table to this path")
    parser.add_argument("--config", help="HandConfig JSON file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = load_config(args.config) if args.config else HandConfig()
    hand = HandController(config)

    gestures_path = Path(args.gestures)
    if not gestures_path.exists():
        print(f"ERROR: Gesture file not found: {gestures_path}")
        sys.exit(1)

    if not hand.import_gestures_file(gestures_path):
        for notice in hand.notices:
            print(f"ERROR: {notice}")
        sys.exit(1)

    print(f"Gestures: {', '.join(hand.gestures.names) or '(none)'}")

    if args.gesture:
        if not hand.apply_gesture(args.gesture):
            print(f"ERROR: Unknown gesture: {args.gesture}")
            sys.exit(1)

    print(f"Current gesture: {hand.current_gesture}")

    # Step safety and sampling in simulated time
    period_ms = config.sample_period_s * 1000.0
    warnings = []
    for i in range(args.ticks):
        now = i * period_ms
        warnings = hand.tick_safety(now_ms=now)
        hand.tick_sample(now_ms=now)

    print(f"\nAfter {args.ticks} ticks ({len(hand.history)} samples):")
    print_hand_state(hand)

    print("\nWarnings:")
    if warnings:
        for w in warnings:
            print(f"  - {w}")
    else:
        print("  none")

    if args.export:
        path = hand.export_gestures_file(args.export)
        print(f"\nExported to: {path}" if path else "\nNothing to export")


if __name__ == "__main__":
    main()
