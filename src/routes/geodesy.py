"""
Spherical geodesy helpers.

Great-circle distance, initial bearing and the direct problem
(destination from origin, distance and bearing) on a spherical Earth.
Accurate to well under a meter at harbor scale; antimeridian and pole
wraparound are not handled.
"""

import math

from src.routes.models import GeoPoint

EARTH_RADIUS_M = 6371e3  # Mean Earth radius in meters


def distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Calculate haversine great circle distance between two points.

    Args:
        p1: First point
        p2: Second point

    Returns:
        Distance in meters
    """
    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)
    dlat = math.radians(p2.lat - p1.lat)
    dlng = math.radians(p2.lng - p1.lng)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def bearing(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Calculate initial bearing from p1 to p2.

    Coincident points have no defined bearing; 0 is returned.

    Returns:
        Bearing in degrees (0-360)
    """
    if p1.lat == p2.lat and p1.lng == p2.lng:
        return 0.0

    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)
    dlng = math.radians(p2.lng - p1.lng)

    x = math.sin(dlng) * math.cos(lat2)
    y = (math.cos(lat1) * math.sin(lat2) -
         math.sin(lat1) * math.cos(lat2) * math.cos(dlng))

    return normalize_angle(math.degrees(math.atan2(x, y)))


def destination_point(origin: GeoPoint, distance_m: float, bearing_deg: float) -> GeoPoint:
    """
    Solve the direct geodesic problem on a sphere.

    Args:
        origin: Start point
        distance_m: Distance to travel in meters
        bearing_deg: Initial bearing in degrees

    Returns:
        Destination point
    """
    delta = distance_m / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)

    sin_lat2 = (math.sin(lat1) * math.cos(delta) +
                math.cos(lat1) * math.sin(delta) * math.cos(theta))
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lng2 = lng1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )

    return GeoPoint(lat=math.degrees(lat2), lng=math.degrees(lng2))


def normalize_angle(angle_deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle_deg % 360.0
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def signed_angle(angle_deg: float) -> float:
    """Wrap an angle into (-180, 180]."""
    wrapped = normalize_angle(angle_deg)
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped
