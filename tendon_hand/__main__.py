"""
Main entry point for the tendon hand model.

Usage:
    python -m tendon_hand           # Print the neutral hand state
    python -m tendon_hand --verify  # Run verification report
"""

import argparse

from .config import CMD_CENTER, CMD_MAX, CMD_MIN, FINGERS, MAX_DISPLACEMENT_MM, PULLEY_RADIUS_MM
from .control import HandController
from .physics import (angle_from_command, command_from_angle, engagement_onsets,
                      solve_joints, tendon_delta)


def print_hand_state(hand: HandController):
    print("  ID  Name            Cmd(us)   Angle    Tendon    Joints")
    print("  " + "-" * 66)
    for a in hand.actuators:
        joints = hand.joints[a.finger]
        joint_str = "  ".join(f"{j.upper()}={v:5.1f}°" for j, v in joints.angles.items())
        print(f"  {a.id:2d}  {a.name:14s}  {a.command:6d}   {a.angle:5.1f}°  {a.tendon_delta:+6.2f}mm"
              f"   {joint_str}")


def run_verification():
    """Walk through every stage of the actuation chain."""
    print("=" * 70)
    print("TENDON HAND VERIFICATION")
    print("=" * 70)

    print(f"\n{'='*70}")
    print("PARAMETERS")
    print("=" * 70)
    print(f"  Command range:   {CMD_MIN}-{CMD_MAX} us (center {CMD_CENTER})")
    print(f"  Pulley radius:   {PULLEY_RADIUS_MM} mm")
    print(f"  Full flexion at: {MAX_DISPLACEMENT_MM} mm of tendon travel")

    # Test 1: Actuator model
    print(f"\n{'='*70}")
    print("1. COMMAND → ANGLE")
    print("=" * 70)
    print("  Cmd(us)   Angle     Round-trip")
    print("  " + "-" * 34)
    for cmd in [500, 1000, 1500, 2000, 2500]:
        angle = angle_from_command(cmd)
        print(f"  {cmd:6d}   {angle:6.1f}°    {command_from_angle(angle):6d}")

    # Test 2: Tendon geometry
    print(f"\n{'='*70}")
    print("2. ANGLE → TENDON DISPLACEMENT (ΔL = r·(θ-90°))")
    print("=" * 70)
    print("  Angle     ΔL (mm)")
    print("  " + "-" * 20)
    for angle in [0, 45, 90, 135, 180]:
        print(f"  {angle:4d}°    {tendon_delta(angle):+6.2f}")

    # Test 3: Coupling
    print(f"\n{'='*70}")
    print("3. TENDON → JOINTS (index finger, sequential engagement)")
    print("=" * 70)
    print("  ΔL (mm)   MCP      PIP      DIP")
    print("  " + "-" * 36)
    for delta in [0, 2, 4, 6, 8, 10, 12, 14, 16]:
        j = solve_joints(delta, "index")
        print(f"  {delta:5.1f}   {j['mcp']:5.1f}°  {j['pip']:5.1f}°  {j['dip']:5.1f}°")

    print("\n  Engagement onsets (flexion ratio):")
    for finger in ("thumb", "index"):
        onsets = engagement_onsets(finger)
        print(f"    {finger:6s} " + "  ".join(f"{k.upper()}={v:.2f}" for k, v in onsets.items()))

    # Test 4: Safety
    print(f"\n{'='*70}")
    print("4. STALL DETECTION (index held at 520us)")
    print("=" * 70)
    hand = HandController()
    hand.tick_safety(now_ms=0)
    hand.set_command(1, 520)
    for t in [0, 1000, 2000, 2100]:
        warnings = hand.tick_safety(now_ms=t)
        print(f"  t={t:5d}ms  " + ("; ".join(str(w) for w in warnings) or "-"))
    hand.set_command(1, CMD_CENTER)
    warnings = hand.tick_safety(now_ms=2200)
    print(f"  t= 2200ms  (relieved) " + ("; ".join(str(w) for w in warnings) or "-"))

    # Test 5: Full hand
    print(f"\n{'='*70}")
    print("5. FULL HAND AT 2200us")
    print("=" * 70)
    for actuator_id in range(len(FINGERS)):
        hand.set_command(actuator_id, 2200)
    print_hand_state(hand)

    print("\n" + "=" * 70)
    print("VERIFICATION COMPLETE")
    print("=" * 70)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Tendon-driven hand actuation model")
    parser.add_argument("--verify", action="store_true", help="Run verification report")
    args = parser.parse_args()

    if args.verify:
        run_verification()
    else:
        print("Tendon hand at neutral pose.")
        print("Run with --verify for the verification report.\n")
        print_hand_state(HandController())


if __name__ == '__main__':
    main()
