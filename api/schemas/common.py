"""Common shared schemas used across multiple domains."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.routes.models import (
    CurrentConditions,
    EnvironmentalFactors,
    GeoPoint,
    PropulsionDirection,
    Ship,
    WindConditions,
    make_waypoint,
)


class GeoPointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class WaypointModel(GeoPointModel):
    """Waypoint as exchanged with the map front-end (camelCase keys)."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    speed_to_next: Optional[float] = Field(None, alias="speedToNext")
    propulsion_direction: Optional[PropulsionDirection] = Field(None, alias="propulsionDirection")

    def to_waypoint(self):
        return make_waypoint(
            self.lat, self.lng, self.id, self.speed_to_next, self.propulsion_direction
        )


class ShipModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    length: float = Field(150.0, gt=0, description="Length overall in meters")
    beam: float = Field(25.0, gt=0, description="Beam in meters")
    turning_radius: float = Field(300.0, gt=0, alias="turningRadius", description="Minimum turning radius in meters")

    def to_ship(self) -> Ship:
        return Ship(length=self.length, beam=self.beam, turning_radius=self.turning_radius)


class ForcingModel(BaseModel):
    speed: float = Field(0.0, ge=0, description="Speed in knots")
    direction: float = Field(0.0, ge=0, le=360, description="Direction coming FROM, degrees")


class EnvironmentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    drift_enabled: bool = Field(False, alias="driftEnabled")
    wind: ForcingModel = Field(default_factory=ForcingModel)
    current: ForcingModel = Field(default_factory=ForcingModel)

    def to_environment(self) -> EnvironmentalFactors:
        return EnvironmentalFactors(
            drift_enabled=self.drift_enabled,
            wind=WindConditions(speed=self.wind.speed, direction=self.wind.direction),
            current=CurrentConditions(speed=self.current.speed, direction=self.current.direction),
        )
