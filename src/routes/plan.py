"""
Route plan store and plan files.

A plan is the ordered waypoint list plus the ship. It is saved as JSON:

    {
      "waypoints": [{"id": 1, "lat": 51.9, "lng": 4.1,
                     "speedToNext": 5.0, "propulsionDirection": "Forward"}],
      "ship": {"length": 150, "beam": 25, "turningRadius": 300}
    }

Environment, pivot duration and the derived legs are not persisted; they
are recomputed after loading.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from src.routes.models import (
    GeoPoint,
    PropulsionDirection,
    Ship,
    Waypoint,
    make_waypoint,
    resolve_speed,
)

logger = logging.getLogger(__name__)

PLAN_FILENAME = "trajectory-plan.json"


class PlanFormatError(ValueError):
    """Plan document is not a waypoints + ship mapping."""


@dataclass
class RoutePlan:
    """Editable route: waypoints in order plus the current ship."""
    waypoints: List[Waypoint] = field(default_factory=list)
    ship: Ship = field(default_factory=Ship)

    def __post_init__(self):
        self._next_id = max((wp.id for wp in self.waypoints), default=0) + 1

    def _index_of(self, waypoint_id: int) -> int:
        for i, wp in enumerate(self.waypoints):
            if wp.id == waypoint_id:
                return i
        raise KeyError(f"Waypoint {waypoint_id} not in plan")

    def get(self, waypoint_id: int) -> Waypoint:
        return self.waypoints[self._index_of(waypoint_id)]

    def add_waypoint(
        self,
        point: GeoPoint,
        speed_to_next: Optional[float] = None,
        propulsion_direction: Optional[PropulsionDirection] = None,
    ) -> Waypoint:
        """Append a waypoint with a fresh id."""
        waypoint = make_waypoint(
            point.lat, point.lng, self._next_id, speed_to_next, propulsion_direction
        )
        self._next_id += 1
        self.waypoints.append(waypoint)
        return waypoint

    def move_waypoint(self, waypoint_id: int, point: GeoPoint) -> Waypoint:
        i = self._index_of(waypoint_id)
        self.waypoints[i] = replace(self.waypoints[i], lat=point.lat, lng=point.lng)
        return self.waypoints[i]

    def set_speed(self, waypoint_id: int, speed_kts: float) -> Waypoint:
        i = self._index_of(waypoint_id)
        self.waypoints[i] = replace(self.waypoints[i], speed_to_next=resolve_speed(speed_kts))
        return self.waypoints[i]

    def set_propulsion(self, waypoint_id: int, direction: PropulsionDirection) -> Waypoint:
        i = self._index_of(waypoint_id)
        self.waypoints[i] = replace(
            self.waypoints[i], propulsion_direction=PropulsionDirection.parse(direction)
        )
        return self.waypoints[i]

    def delete_waypoint(self, waypoint_id: int) -> None:
        del self.waypoints[self._index_of(waypoint_id)]

    def clear(self) -> None:
        self.waypoints.clear()

    def set_ship(self, ship: Ship) -> None:
        self.ship = ship


def plan_to_dict(plan: RoutePlan) -> Dict[str, Any]:
    return {
        "waypoints": [wp.to_dict() for wp in plan.waypoints],
        "ship": plan.ship.to_dict(),
    }


def plan_from_dict(data: Any) -> RoutePlan:
    """
    Build a plan from a decoded plan document.

    Raises:
        PlanFormatError: If waypoints or ship are missing or unreadable
    """
    if not isinstance(data, dict) or not isinstance(data.get("waypoints"), list) or not data.get("ship"):
        raise PlanFormatError("Invalid plan file format: expected 'waypoints' and 'ship'")

    try:
        waypoints = [Waypoint.from_dict(wp) for wp in data["waypoints"]]
        ship = Ship.from_dict(data["ship"])
    except (KeyError, TypeError, ValueError) as e:
        raise PlanFormatError(f"Invalid plan file format: {e}") from e

    return RoutePlan(waypoints=waypoints, ship=ship)


def dumps_plan(plan: RoutePlan) -> str:
    return json.dumps(plan_to_dict(plan), indent=2)


def loads_plan(content: Union[str, bytes]) -> RoutePlan:
    """
    Parse plan JSON content.

    Raises:
        PlanFormatError: If the content is not valid plan JSON
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PlanFormatError(f"Failed to parse plan file: {e}") from e
    return plan_from_dict(data)


def save_plan(plan: RoutePlan, file_path: Path) -> Path:
    """Write a plan file and return its path."""
    file_path = Path(file_path)
    file_path.write_text(dumps_plan(plan), encoding="utf-8")
    logger.info(f"Saved plan with {len(plan.waypoints)} waypoints to {file_path}")
    return file_path


def load_plan(file_path: Path) -> RoutePlan:
    """
    Read a plan file.

    Raises:
        PlanFormatError: If the file is not a valid plan
    """
    plan = loads_plan(Path(file_path).read_text(encoding="utf-8"))
    logger.info(f"Loaded plan with {len(plan.waypoints)} waypoints from {file_path}")
    return plan


def create_plan_from_points(
    points: List[Tuple[float, float]],
    ship: Optional[Ship] = None,
) -> RoutePlan:
    """
    Create a plan from a list of (lat, lng) tuples with default leg settings.
    """
    plan = RoutePlan(ship=ship or Ship())
    for lat, lng in points:
        plan.add_waypoint(GeoPoint(lat=lat, lng=lng))
    return plan
