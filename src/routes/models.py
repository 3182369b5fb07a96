"""
Route planning data model.

Waypoints, ship particulars and environmental forcing supplied by the
plan editor. Optional waypoint fields are resolved to their defaults
when a waypoint is built, so the trajectory code never sees a missing
speed or propulsion direction.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_SPEED_KTS = 5.0
DEFAULT_TURNING_RADIUS_M = 300.0


class PropulsionDirection(Enum):
    """Direction the hull moves relative to the bow."""
    FORWARD = "Forward"
    ASTERN = "Astern"

    @classmethod
    def parse(cls, value: Any) -> "PropulsionDirection":
        """Resolve a raw value, falling back to FORWARD when unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.strip().lower() in (member.value.lower(), member.name.lower()):
                    return member
        return cls.FORWARD


@dataclass(frozen=True)
class GeoPoint:
    """A position in degrees."""
    lat: float
    lng: float


@dataclass(frozen=True)
class Waypoint(GeoPoint):
    """A user-placed route point."""
    id: int = 0
    speed_to_next: float = DEFAULT_SPEED_KTS  # knots, for the leg starting here
    propulsion_direction: PropulsionDirection = PropulsionDirection.FORWARD

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "speedToNext": self.speed_to_next,
            "propulsionDirection": self.propulsion_direction.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Waypoint":
        """
        Build a waypoint from a plan-file entry.

        Missing or malformed speed and propulsion values are defaulted,
        never rejected.
        """
        return cls(
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            id=int(data["id"]),
            speed_to_next=resolve_speed(data.get("speedToNext")),
            propulsion_direction=PropulsionDirection.parse(data.get("propulsionDirection")),
        )


def resolve_speed(value: Any, default: float = DEFAULT_SPEED_KTS) -> float:
    """Return a usable leg speed in knots, or the default."""
    try:
        speed = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(speed) or speed < 0:
        return default
    return speed


@dataclass(frozen=True)
class Ship:
    """Vessel particulars, all in meters."""
    length: float = 150.0
    beam: float = 25.0
    turning_radius: float = DEFAULT_TURNING_RADIUS_M

    def __post_init__(self):
        for name in ("length", "beam", "turning_radius"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"Ship {name} must be positive, got {value}")

    def to_dict(self) -> Dict[str, float]:
        return {
            "length": self.length,
            "beam": self.beam,
            "turningRadius": self.turning_radius,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ship":
        """Older plan files carry no turning radius; 300 m is assumed."""
        return cls(
            length=float(data["length"]),
            beam=float(data["beam"]),
            turning_radius=float(data.get("turningRadius", DEFAULT_TURNING_RADIUS_M)),
        )


@dataclass(frozen=True)
class WindConditions:
    """Wind speed (knots) and the direction it blows FROM (degrees)."""
    speed: float = 0.0
    direction: float = 0.0


@dataclass(frozen=True)
class CurrentConditions:
    """Current speed (knots) and the direction it comes FROM (degrees)."""
    speed: float = 0.0
    direction: float = 0.0


@dataclass(frozen=True)
class EnvironmentalFactors:
    """Wind and current forcing applied when drift is enabled."""
    drift_enabled: bool = False
    wind: WindConditions = field(default_factory=WindConditions)
    current: CurrentConditions = field(default_factory=CurrentConditions)

    @property
    def is_calm(self) -> bool:
        """True when neither wind nor current would move the vessel."""
        return self.wind.speed <= 0 and self.current.speed <= 0


def make_waypoint(
    lat: float,
    lng: float,
    id: int,
    speed_to_next: Optional[float] = None,
    propulsion_direction: Optional[PropulsionDirection] = None,
) -> Waypoint:
    """Create a waypoint, applying defaults for unset optional fields."""
    return Waypoint(
        lat=lat,
        lng=lng,
        id=id,
        speed_to_next=resolve_speed(speed_to_next),
        propulsion_direction=PropulsionDirection.parse(propulsion_direction),
    )
