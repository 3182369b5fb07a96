"""
Drift and course-over-ground calculation.

Decomposes the vessel's velocity through the water, the surface current
and wind leeway into east/north components, sums them into a ground
velocity and solves for the heading offset (crab angle) needed to hold
the intended course.

Wind and current directions follow the "coming from" convention; the
resulting push acts 180 degrees away from the stated direction.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from src.routes.geodesy import normalize_angle
from src.routes.models import EnvironmentalFactors

logger = logging.getLogger(__name__)

KNOTS_TO_MS = 0.514444
MS_TO_KNOTS = 1 / KNOTS_TO_MS

# Empirical fraction of wind speed transferred to the hull as leeway
WIND_LEEWAY_FACTOR = 0.03


@dataclass(frozen=True)
class CourseCorrection:
    """
    Heading offset required to track the intended course.

    ``angle_deg`` is None when the drift is too strong for the course to
    be held at the leg's speed.
    """
    angle_deg: Optional[float] = 0.0

    @property
    def maintainable(self) -> bool:
        return self.angle_deg is not None

    @property
    def effective_angle(self) -> float:
        """Offset to apply to headings; an unmaintainable course applies none."""
        return self.angle_deg if self.angle_deg is not None else 0.0

    @classmethod
    def unmaintainable(cls) -> "CourseCorrection":
        return cls(angle_deg=None)


@dataclass(frozen=True)
class DriftSolution:
    """Ground track of one leg under drift."""
    sog_kts: float
    cog_deg: float
    sog_ms: float
    course_correction: CourseCorrection


def velocity_vector(direction_deg: float, magnitude: float) -> np.ndarray:
    """Decompose a bearing and magnitude into (east, north) components."""
    rad = np.radians(direction_deg)
    return np.array([magnitude * np.sin(rad), magnitude * np.cos(rad)])


def vector_bearing(vector: np.ndarray) -> float:
    """Bearing of an (east, north) vector in degrees (0-360)."""
    return normalize_angle(math.degrees(math.atan2(float(vector[0]), float(vector[1]))))


def drift_vector(environment: EnvironmentalFactors) -> np.ndarray:
    """
    Combined current and wind-leeway drift in m/s.

    Returns:
        (east, north) drift velocity
    """
    current = velocity_vector(
        environment.current.direction + 180.0,
        environment.current.speed * KNOTS_TO_MS,
    )
    leeway = velocity_vector(
        environment.wind.direction + 180.0,
        environment.wind.speed * KNOTS_TO_MS * WIND_LEEWAY_FACTOR,
    )
    return current + leeway


def course_correction_angle(course_deg: float, ship_speed_ms: float, drift: np.ndarray) -> CourseCorrection:
    """
    Solve sin(CCA) = (|drift| / ship speed) * sin(course - drift bearing).

    Args:
        course_deg: Intended course in degrees
        ship_speed_ms: Speed through water in m/s
        drift: (east, north) drift velocity in m/s

    Returns:
        CourseCorrection, unmaintainable when |sin(CCA)| > 1
    """
    drift_speed = float(np.hypot(drift[0], drift[1]))
    if drift_speed == 0:
        return CourseCorrection(0.0)
    if ship_speed_ms <= 0:
        return CourseCorrection.unmaintainable()

    drift_bearing = vector_bearing(drift)
    sin_cca = (drift_speed / ship_speed_ms) * math.sin(math.radians(course_deg - drift_bearing))
    if abs(sin_cca) > 1:
        return CourseCorrection.unmaintainable()

    return CourseCorrection(math.degrees(math.asin(sin_cca)))


def solve_drift(course_deg: float, speed_kts: float, environment: EnvironmentalFactors) -> DriftSolution:
    """
    Calculate speed and course over ground for one leg.

    Args:
        course_deg: Intended straight-line course in degrees
        speed_kts: Speed through water in knots
        environment: Wind and current forcing

    Returns:
        DriftSolution with SOG, COG and course correction
    """
    ship_speed_ms = speed_kts * KNOTS_TO_MS
    ship = velocity_vector(course_deg, ship_speed_ms)
    drift = drift_vector(environment)

    ground = ship + drift
    sog_ms = float(np.hypot(ground[0], ground[1]))
    correction = course_correction_angle(course_deg, ship_speed_ms, drift)

    if not correction.maintainable:
        logger.debug(
            f"Course {course_deg:.1f}° cannot be held at {speed_kts:.1f} kts "
            f"against {float(np.hypot(drift[0], drift[1])) * MS_TO_KNOTS:.1f} kts drift"
        )

    return DriftSolution(
        sog_kts=sog_ms * MS_TO_KNOTS,
        cog_deg=vector_bearing(ground),
        sog_ms=sog_ms,
        course_correction=correction,
    )
