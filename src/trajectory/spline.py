"""
Uniform Catmull-Rom curve between two waypoints.

The curve is evaluated independently on the latitude and longitude axes,
treating a single leg as a locally flat plane. It is written in cubic
Hermite form (tangents m1 = (p2 - p0) / 2, m2 = (p3 - p1) / 2) so that
the endpoint weights are exact and the curve passes through p1 at t=0
and p2 at t=1 without rounding error.
"""

import math
from typing import Tuple

import numpy as np

from src.routes.geodesy import distance, normalize_angle
from src.routes.models import GeoPoint

METERS_PER_DEG_LAT = 111132.954
METERS_PER_DEG_LNG_EQUATOR = 111320.0

# Cross-product magnitude below which a curve is considered straight
STRAIGHT_EPSILON = 1e-6

ControlPoints = Tuple[GeoPoint, GeoPoint, GeoPoint, GeoPoint]


def _hermite(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    t2 = t * t
    t3 = t2 * t
    m1 = 0.5 * (p2 - p0)
    m2 = 0.5 * (p3 - p1)
    return ((2 * t3 - 3 * t2 + 1) * p1 +
            (t3 - 2 * t2 + t) * m1 +
            (-2 * t3 + 3 * t2) * p2 +
            (t3 - t2) * m2)


def _hermite_derivative(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    t2 = t * t
    m1 = 0.5 * (p2 - p0)
    m2 = 0.5 * (p3 - p1)
    return ((6 * t2 - 6 * t) * p1 +
            (3 * t2 - 4 * t + 1) * m1 +
            (-6 * t2 + 6 * t) * p2 +
            (3 * t2 - 2 * t) * m2)


def point_on_curve(t: float, p0: GeoPoint, p1: GeoPoint, p2: GeoPoint, p3: GeoPoint) -> GeoPoint:
    """Position on the curve at parameter t in [0, 1]."""
    return GeoPoint(
        lat=_hermite(t, p0.lat, p1.lat, p2.lat, p3.lat),
        lng=_hermite(t, p0.lng, p1.lng, p2.lng, p3.lng),
    )


def tangent_on_curve(
    t: float, p0: GeoPoint, p1: GeoPoint, p2: GeoPoint, p3: GeoPoint
) -> Tuple[float, float]:
    """Derivative of the curve at t as (dlat/dt, dlng/dt) in degrees."""
    return (
        _hermite_derivative(t, p0.lat, p1.lat, p2.lat, p3.lat),
        _hermite_derivative(t, p0.lng, p1.lng, p2.lng, p3.lng),
    )


def heading_on_curve(t: float, p0: GeoPoint, p1: GeoPoint, p2: GeoPoint, p3: GeoPoint) -> float:
    """
    Bearing of the curve tangent at t, in degrees (0-360).

    Longitude is scaled by cos(latitude) at the evaluated point so the
    heading matches a true bearing. A zero tangent yields 0.
    """
    dlat, dlng = tangent_on_curve(t, p0, p1, p2, p3)
    lat = _hermite(t, p0.lat, p1.lat, p2.lat, p3.lat)
    east = dlng * math.cos(math.radians(lat))
    if east == 0 and dlat == 0:
        return 0.0
    return normalize_angle(math.degrees(math.atan2(east, dlat)))


def curve_length(
    p0: GeoPoint, p1: GeoPoint, p2: GeoPoint, p3: GeoPoint, segments: int = 20
) -> float:
    """
    Approximate arc length in meters.

    Sums great-circle distances between ``segments + 1`` uniformly spaced
    samples. Deterministic for a given segment count.
    """
    length = 0.0
    prev = point_on_curve(0.0, p0, p1, p2, p3)
    for t in np.linspace(0.0, 1.0, segments + 1)[1:]:
        current = point_on_curve(float(t), p0, p1, p2, p3)
        length += distance(prev, current)
        prev = current
    return length


def turn_radius(p0: GeoPoint, p1: GeoPoint, p2: GeoPoint, p3: GeoPoint) -> float:
    """
    Radius of curvature at the start of the curve (t=0), in meters.

    Degree-space derivatives are converted to meters with local scale
    factors at p1, then kappa = |x'y'' - y'x''| / (x'^2 + y'^2)^1.5.

    Returns:
        Radius in meters, or ``math.inf`` for an effectively straight curve
    """
    metres_lng = METERS_PER_DEG_LNG_EQUATOR * math.cos(math.radians(p1.lat))

    x1 = 0.5 * (p2.lng - p0.lng) * metres_lng
    y1 = 0.5 * (p2.lat - p0.lat) * METERS_PER_DEG_LAT
    x2 = (2 * p0.lng - 5 * p1.lng + 4 * p2.lng - p3.lng) * metres_lng
    y2 = (2 * p0.lat - 5 * p1.lat + 4 * p2.lat - p3.lat) * METERS_PER_DEG_LAT

    cross = abs(x1 * y2 - y1 * x2)
    if cross < STRAIGHT_EPSILON:
        return math.inf

    return (x1 * x1 + y1 * y1) ** 1.5 / cross
