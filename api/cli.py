#!/usr/bin/env python3
"""
Harbor Trajectory Planner CLI Tool.

Command-line interface for working with plan files:
- Print the trajectory leg table for a plan
- Run a headless playback of a plan
- Start the API server

Usage:
    python -m api.cli legs plan.json --pivot-duration 30
    python -m api.cli legs plan.json --drift --current-speed 1.5 --current-dir 90
    python -m api.cli simulate plan.json --speed 64
    python -m api.cli serve
"""
import argparse
import math
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from src.config import settings as core_settings
from src.playback.driver import PLAYBACK_SPEEDS, PlaybackDriver
from src.playback.interpolator import AnimationState
from src.playback.scheduler import ManualTickScheduler
from src.routes.models import CurrentConditions, EnvironmentalFactors, WindConditions
from src.routes.plan import PlanFormatError, load_plan
from src.trajectory.legs import NavigationCommand, TrajectoryLeg, build_legs, summarize_legs


def _environment_from_args(args: argparse.Namespace) -> EnvironmentalFactors:
    return EnvironmentalFactors(
        drift_enabled=args.drift,
        wind=WindConditions(speed=args.wind_speed, direction=args.wind_dir),
        current=CurrentConditions(speed=args.current_speed, direction=args.current_dir),
    )


def _format_correction(leg: TrajectoryLeg) -> str:
    angle = leg.course_correction_angle
    if angle is None:
        return "-"
    if math.isnan(angle):
        return "n/a"
    return f"{angle:+.1f}"


def print_legs(legs: Sequence[TrajectoryLeg]) -> None:
    """Print the leg table and totals."""
    if not legs:
        print("\nAdd at least two waypoints to build a trajectory.")
        return

    print("\n" + "=" * 100)
    print("TRAJECTORY PLAN")
    print("=" * 100)
    print(
        f"{'#':<4} {'Command':<12} {'Turn':>7} {'Line m':>9} {'Curve m':>9} "
        f"{'Course':>7} {'Speed':>6} {'Time s':>8} {'Pivot':>6} {'SOG':>6} {'CCA':>6}  Notes"
    )
    print("-" * 100)

    for i, leg in enumerate(legs, start=1):
        if leg.command == NavigationCommand.END:
            print(f"{i:<4} {leg.command.value:<12}")
            continue
        sog = f"{leg.sog:.1f}" if leg.sog is not None else "-"
        notes = []
        if leg.turn_radius_violation:
            notes.append(f"radius {leg.turn_radius:.0f} m too tight")
        if leg.propulsion.value != "Forward":
            notes.append(leg.propulsion.value.lower())
        print(
            f"{i:<4} {leg.command.value:<12} {abs(leg.turn_angle):>6.1f}° "
            f"{leg.distance:>9.1f} {leg.curve_distance:>9.1f} {leg.course:>6.1f}° "
            f"{leg.speed:>6.1f} {leg.time:>8.1f} {leg.pivot_time:>6.0f} {sog:>6} "
            f"{_format_correction(leg):>6}  {', '.join(notes)}"
        )

    summary = summarize_legs(legs)
    print("=" * 100)
    print(f"Total line:  {summary.total_distance_m:.1f} m")
    print(f"Total curve: {summary.total_curve_distance_m:.1f} m")
    print(f"Total time:  {summary.total_time_s:.1f} s")
    if summary.violation_count:
        print(f"Warning: {summary.violation_count} turn(s) tighter than the ship's turning radius")
    print()


def show_legs(args: argparse.Namespace) -> None:
    """Calculate and print legs for a plan file."""
    plan = load_plan(args.plan)
    legs = build_legs(plan.waypoints, plan.ship, args.pivot_duration, _environment_from_args(args))
    print_legs(legs)


def simulate(args: argparse.Namespace) -> int:
    """Run a headless playback and print sampled states."""
    plan = load_plan(args.plan)
    legs = build_legs(plan.waypoints, plan.ship, args.pivot_duration, _environment_from_args(args))

    states: List[Optional[AnimationState]] = []
    scheduler = ManualTickScheduler()
    driver = PlaybackDriver(scheduler, states.append, hold_seconds=core_settings.playback_hold_s)

    handle = driver.start(legs, plan.waypoints, args.speed)
    if handle is None:
        print("\nNothing to play back: plan takes no time.")
        return 1

    frames = scheduler.run(1.0 / args.fps, max_frames=args.max_frames)
    if not handle.finished:
        driver.cancel(handle)
        print(
            f"\nError: playback stopped after {frames} frames at {handle.progress:.0%}; "
            f"raise --max-frames or --speed",
            file=sys.stderr,
        )
        return 1

    shown = [s for s in states if s is not None]
    step = max(1, len(shown) // args.samples)

    print(f"\nPlayback at {args.speed}x: {frames} frames, {handle.duration:.1f} s simulated")
    print(f"{'Lat':>12} {'Lng':>12} {'Heading':>8} {'Speed':>6}")
    for state in shown[::step] + shown[-1:]:
        print(
            f"{state.position.lat:>12.6f} {state.position.lng:>12.6f} "
            f"{state.heading:>7.1f}° {state.speed:>6.1f}"
        )
    return 0


def serve(args: argparse.Namespace) -> None:
    """Run the API server."""
    import uvicorn
    from api.config import settings

    uvicorn.run(
        "api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level,
    )


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _add_plan_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("plan", type=Path, help="Plan JSON file")
    parser.add_argument(
        "--pivot-duration", type=float, default=core_settings.pivot_duration_s,
        help="Seconds to pivot on propulsion reversal",
    )
    parser.add_argument("--drift", action="store_true", help="Apply wind and current drift")
    parser.add_argument("--wind-speed", type=float, default=0.0, help="Wind speed (knots)")
    parser.add_argument("--wind-dir", type=float, default=0.0, help="Wind FROM direction (deg)")
    parser.add_argument("--current-speed", type=float, default=0.0, help="Current speed (knots)")
    parser.add_argument("--current-dir", type=float, default=0.0, help="Current FROM direction (deg)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Harbor Trajectory Planner CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    legs_parser = subparsers.add_parser("legs", help="Print trajectory legs for a plan")
    _add_plan_args(legs_parser)

    sim_parser = subparsers.add_parser("simulate", help="Run a headless playback")
    _add_plan_args(sim_parser)
    sim_parser.add_argument(
        "--speed", type=int, default=core_settings.playback_speed, choices=PLAYBACK_SPEEDS,
        help="Playback speed multiplier",
    )
    sim_parser.add_argument("--fps", type=positive_int, default=core_settings.playback_fps, help="Frames per second")
    sim_parser.add_argument("--samples", type=positive_int, default=20, help="Number of states to print")
    sim_parser.add_argument(
        "--max-frames", type=positive_int, default=1_000_000,
        help="Give up after this many frames",
    )

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    core_settings.configure_logging()

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command == "legs":
            show_legs(args)
        elif args.command == "simulate":
            return simulate(args)
        elif args.command == "serve":
            serve(args)
    except (OSError, PlanFormatError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
