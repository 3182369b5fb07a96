"""Trajectory derivation: curve geometry, drift and leg calculation."""

from .drift import CourseCorrection, DriftSolution, solve_drift
from .legs import (
    NavigationCommand,
    TrajectoryLeg,
    TrajectorySummary,
    build_legs,
    classify_turn,
    leg_control_points,
    summarize_legs,
)

__all__ = [
    "CourseCorrection",
    "DriftSolution",
    "solve_drift",
    "NavigationCommand",
    "TrajectoryLeg",
    "TrajectorySummary",
    "build_legs",
    "classify_turn",
    "leg_control_points",
    "summarize_legs",
]
