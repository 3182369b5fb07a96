"""Plan file import/export schemas."""

from typing import List

from pydantic import BaseModel, Field

from src.routes.plan import RoutePlan

from .common import ShipModel, WaypointModel


class SavedPlanModel(BaseModel):
    """Waypoints plus ship, as stored in a plan file."""
    waypoints: List[WaypointModel]
    ship: ShipModel = Field(default_factory=ShipModel)

    def to_plan(self) -> RoutePlan:
        return RoutePlan(
            waypoints=[wp.to_waypoint() for wp in self.waypoints],
            ship=self.ship.to_ship(),
        )

    @classmethod
    def from_plan(cls, plan: RoutePlan) -> "SavedPlanModel":
        return cls(
            waypoints=[WaypointModel(**wp.to_dict()) for wp in plan.waypoints],
            ship=ShipModel(**plan.ship.to_dict()),
        )
