"""
Trajectory leg calculation.

Turns an ordered waypoint list, the ship's turning limit, the pivot
duration and environmental forcing into one annotated leg per waypoint
pair plus a terminal END leg.

Per leg:
- straight distance and course, spline curve distance
- tangent headings at both ends (reversed when going astern)
- timing, including a stationary pivot when propulsion reverses
- turn command and turning-radius violation
- optional drift: SOG, COG, predicted end point and course correction
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from src.routes.geodesy import bearing, destination_point, distance, normalize_angle, signed_angle
from src.routes.models import (
    EnvironmentalFactors,
    GeoPoint,
    PropulsionDirection,
    Ship,
    Waypoint,
)
from src.trajectory.drift import KNOTS_TO_MS, CourseCorrection, solve_drift
from src.trajectory.spline import ControlPoints, curve_length, heading_on_curve, turn_radius

logger = logging.getLogger(__name__)

TURN_THRESHOLD_DEG = 5.0


class NavigationCommand(Enum):
    """Helm command for a leg."""
    START = "Start"
    PORT = "Port"
    STARBOARD = "Starboard"
    STRAIGHT = "Straight"
    END = "End of Plan"


@dataclass(frozen=True)
class TrajectoryLeg:
    """A derived leg between two consecutive waypoints."""
    id: int  # Start waypoint id
    start: Waypoint
    end: Waypoint

    # Geometry
    distance: float  # Straight line, meters
    curve_distance: float  # Along the spline, meters
    course: float  # Straight-line bearing, degrees
    start_heading: float  # Bow heading at start, degrees
    end_heading: float  # Bow heading at end, degrees

    # Manoeuvre
    command: NavigationCommand
    turn_angle: float  # Signed, positive = port
    turn_radius: float  # Meters, inf when straight
    turn_radius_violation: bool

    # Timing
    speed: float  # Knots
    time: float  # Seconds, including pivot
    pivot_time: float  # Seconds
    propulsion: PropulsionDirection

    # Drift (only when drift is enabled)
    sog: Optional[float] = None  # Knots
    cog_course: Optional[float] = None  # Degrees
    predicted_end: Optional[GeoPoint] = None
    course_correction: Optional[CourseCorrection] = None

    @property
    def move_time(self) -> float:
        """Seconds spent under way, excluding the pivot."""
        return self.time - self.pivot_time

    @property
    def course_correction_angle(self) -> Optional[float]:
        """Correction in degrees, NaN when unmaintainable, None without drift."""
        if self.course_correction is None:
            return None
        if not self.course_correction.maintainable:
            return math.nan
        return self.course_correction.angle_deg


@dataclass(frozen=True)
class TrajectorySummary:
    """Totals over the real (non-terminal) legs."""
    leg_count: int
    total_distance_m: float
    total_curve_distance_m: float
    total_time_s: float
    total_pivot_time_s: float
    violation_count: int


def classify_turn(turn_angle: float) -> NavigationCommand:
    """Map a signed turn angle onto PORT, STARBOARD or STRAIGHT."""
    if turn_angle > TURN_THRESHOLD_DEG:
        return NavigationCommand.PORT
    if turn_angle < -TURN_THRESHOLD_DEG:
        return NavigationCommand.STARBOARD
    return NavigationCommand.STRAIGHT


def leg_control_points(
    points: Sequence[GeoPoint],
    propulsions: Sequence[PropulsionDirection],
    index: int,
) -> ControlPoints:
    """
    Catmull-Rom control points for the leg starting at ``points[index]``.

    The neighbouring points are collapsed onto the leg's own endpoints
    across a propulsion reversal, so the curve starts from rest after a
    pivot and comes to rest before the next one. Route ends repeat the
    endpoint.
    """
    p1 = points[index]
    p2 = points[index + 1]

    if index > 0 and propulsions[index] == propulsions[index - 1]:
        p0 = points[index - 1]
    else:
        p0 = p1

    if index + 2 < len(points) and propulsions[index + 1] == propulsions[index]:
        p3 = points[index + 2]
    else:
        p3 = p2

    return p0, p1, p2, p3


def _advance_drift(
    predicted: GeoPoint,
    start: GeoPoint,
    end: GeoPoint,
    course: float,
    speed_kts: float,
    move_time: float,
    environment: EnvironmentalFactors,
) -> Tuple[dict, GeoPoint]:
    """
    Drift fields for one leg and the next predicted start position.

    Returns:
        Tuple of (leg drift fields, predicted end)
    """
    if environment.is_calm:
        # Keep the predicted path identical to the intended one
        predicted_end = GeoPoint(
            lat=predicted.lat + (end.lat - start.lat),
            lng=predicted.lng + (end.lng - start.lng),
        )
        fields = {
            "sog": speed_kts,
            "cog_course": course,
            "predicted_end": predicted_end,
            "course_correction": CourseCorrection(0.0),
        }
        return fields, predicted_end

    solution = solve_drift(course, speed_kts, environment)
    predicted_end = destination_point(predicted, solution.sog_ms * move_time, solution.cog_deg)
    fields = {
        "sog": solution.sog_kts,
        "cog_course": solution.cog_deg,
        "predicted_end": predicted_end,
        "course_correction": solution.course_correction,
    }
    return fields, predicted_end


def build_legs(
    waypoints: Sequence[Waypoint],
    ship: Ship,
    pivot_duration: float,
    environment: Optional[EnvironmentalFactors] = None,
) -> List[TrajectoryLeg]:
    """
    Calculate the trajectory legs for a route.

    Pure function: the only running state is the predicted (drifted)
    position, threaded from one leg to the next within this call.

    Args:
        waypoints: Ordered route waypoints
        ship: Vessel particulars (turning radius is checked)
        pivot_duration: Seconds spent pivoting when propulsion reverses
        environment: Wind/current forcing (calm, drift off when None)

    Returns:
        One leg per waypoint pair plus a terminal END leg, or an empty
        list for fewer than two waypoints
    """
    if len(waypoints) < 2:
        return []

    environment = environment or EnvironmentalFactors()
    propulsions = [wp.propulsion_direction for wp in waypoints]

    legs: List[TrajectoryLeg] = []
    predicted: GeoPoint = waypoints[0].point
    previous_course: Optional[float] = None

    for i in range(len(waypoints) - 1):
        start = waypoints[i]
        end = waypoints[i + 1]
        propulsion = propulsions[i]

        pivots = i > 0 and propulsion != propulsions[i - 1]
        pivot_time = float(pivot_duration) if pivots else 0.0

        p0, p1, p2, p3 = leg_control_points(waypoints, propulsions, i)

        leg_distance = distance(start, end)
        course = bearing(start, end)
        curve_distance = curve_length(p0, p1, p2, p3)

        start_heading = heading_on_curve(0.0, p0, p1, p2, p3)
        end_heading = heading_on_curve(1.0, p0, p1, p2, p3)
        if propulsion == PropulsionDirection.ASTERN:
            start_heading = normalize_angle(start_heading + 180.0)
            end_heading = normalize_angle(end_heading + 180.0)

        speed = start.speed_to_next
        speed_ms = speed * KNOTS_TO_MS
        move_time = curve_distance / speed_ms if speed_ms > 0 else 0.0

        if previous_course is None:
            command = NavigationCommand.START
            turn_angle = 0.0
        else:
            turn_angle = signed_angle(course - previous_course)
            command = classify_turn(turn_angle)

        radius = math.inf
        violation = False
        if command in (NavigationCommand.PORT, NavigationCommand.STARBOARD) and pivot_time == 0:
            radius = turn_radius(p0, p1, p2, p3)
            violation = radius < ship.turning_radius

        drift_fields = {}
        if environment.drift_enabled:
            drift_fields, predicted = _advance_drift(
                predicted, start, end, course, speed, move_time, environment
            )

        legs.append(TrajectoryLeg(
            id=start.id,
            start=start,
            end=end,
            distance=leg_distance,
            curve_distance=curve_distance,
            course=course,
            start_heading=start_heading,
            end_heading=end_heading,
            command=command,
            turn_angle=turn_angle,
            turn_radius=radius,
            turn_radius_violation=violation,
            speed=speed,
            time=move_time + pivot_time,
            pivot_time=pivot_time,
            propulsion=propulsion,
            **drift_fields,
        ))
        previous_course = course

    last_leg = legs[-1]
    last = waypoints[-1]
    legs.append(TrajectoryLeg(
        id=last.id,
        start=last,
        end=last,
        distance=0.0,
        curve_distance=0.0,
        course=last_leg.course,
        start_heading=last_leg.start_heading,
        end_heading=last_leg.end_heading,
        command=NavigationCommand.END,
        turn_angle=0.0,
        turn_radius=math.inf,
        turn_radius_violation=False,
        speed=0.0,
        time=0.0,
        pivot_time=0.0,
        propulsion=last.propulsion_direction,
    ))

    violations = sum(1 for leg in legs if leg.turn_radius_violation)
    if violations:
        logger.debug(f"{violations} of {len(legs) - 1} legs exceed turning radius {ship.turning_radius} m")

    return legs


def summarize_legs(legs: Sequence[TrajectoryLeg]) -> TrajectorySummary:
    """Total distances, times and violations over the real legs."""
    real = [leg for leg in legs if leg.command != NavigationCommand.END]
    return TrajectorySummary(
        leg_count=len(real),
        total_distance_m=sum(leg.distance for leg in real),
        total_curve_distance_m=sum(leg.curve_distance for leg in real),
        total_time_s=sum(leg.time for leg in real),
        total_pivot_time_s=sum(leg.pivot_time for leg in real),
        violation_count=sum(1 for leg in real if leg.turn_radius_violation),
    )
