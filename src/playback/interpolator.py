"""
Playback interpolation.

Maps a progress fraction of the total transit time onto the vessel's
instantaneous position, heading and speed. Pivot phases rotate the ship
in place; movement phases follow the same Catmull-Rom curve the leg
calculation used, shifted onto the drift-predicted track when drift is
enabled.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from src.routes.geodesy import normalize_angle, signed_angle
from src.routes.models import GeoPoint, PropulsionDirection, Waypoint
from src.trajectory.legs import NavigationCommand, TrajectoryLeg, leg_control_points
from src.trajectory.spline import heading_on_curve, point_on_curve


@dataclass(frozen=True)
class AnimationState:
    """Instantaneous simulated vessel state."""
    position: GeoPoint
    heading: float  # Degrees
    speed: float  # Knots


def total_duration(legs: Sequence[TrajectoryLeg]) -> float:
    """Transit time in seconds, pivots included."""
    return sum(leg.time for leg in legs)


def predicted_positions(legs: Sequence[TrajectoryLeg], waypoints: Sequence[Waypoint]) -> List[GeoPoint]:
    """
    Drift-adjusted waypoint positions.

    The first point is the first waypoint; each following point is the
    predicted end of the leg arriving there. Without drift data the
    intended positions are returned.
    """
    positions = [wp.point for wp in waypoints]
    for i, leg in enumerate(legs):
        if leg.command == NavigationCommand.END or leg.predicted_end is None:
            continue
        if i + 1 < len(positions):
            positions[i + 1] = leg.predicted_end
    return positions


def _last_real_index(legs: Sequence[TrajectoryLeg]) -> int:
    for i in range(len(legs) - 1, -1, -1):
        if legs[i].command != NavigationCommand.END:
            return i
    return -1


def interpolate(
    legs: Sequence[TrajectoryLeg],
    waypoints: Sequence[Waypoint],
    progress: float,
    duration: float,
) -> Optional[AnimationState]:
    """
    Calculate the animation state at a point in the transit.

    Args:
        legs: Legs from ``build_legs`` for these waypoints
        waypoints: Route waypoints (intended positions)
        progress: Fraction of the transit elapsed, 0-1
        duration: Total transit time in seconds

    Returns:
        AnimationState, or None when there is nothing to play back
    """
    last_real = _last_real_index(legs)
    if last_real < 0:
        return None

    current_time = progress * duration
    propulsions = [wp.propulsion_direction for wp in waypoints]
    intended = [wp.point for wp in waypoints]
    predicted = predicted_positions(legs, waypoints)

    accumulated = 0.0
    for i, leg in enumerate(legs):
        if leg.command == NavigationCommand.END:
            continue

        leg_end_time = accumulated + leg.time
        if current_time > leg_end_time and i != last_real:
            accumulated = leg_end_time
            continue

        time_into_leg = current_time - accumulated

        if time_into_leg < leg.pivot_time:
            pivot_progress = time_into_leg / leg.pivot_time
            from_heading = legs[i - 1].end_heading if i > 0 else leg.start_heading
            sweep = signed_angle(leg.start_heading - from_heading)
            return AnimationState(
                position=predicted[i],
                heading=normalize_angle(from_heading + sweep * pivot_progress),
                speed=0.0,
            )

        move_time = leg.move_time
        leg_progress = (time_into_leg - leg.pivot_time) / move_time if move_time > 0 else 1.0
        leg_progress = min(max(leg_progress, 0.0), 1.0)

        position = point_on_curve(leg_progress, *leg_control_points(predicted, propulsions, i))
        heading = heading_on_curve(leg_progress, *leg_control_points(intended, propulsions, i))
        if leg.propulsion == PropulsionDirection.ASTERN:
            heading += 180.0
        if leg.course_correction is not None:
            heading += leg.course_correction.effective_angle

        return AnimationState(position=position, heading=normalize_angle(heading), speed=leg.speed)

    final = legs[last_real]
    return AnimationState(position=final.end.point, heading=final.end_heading, speed=0.0)
