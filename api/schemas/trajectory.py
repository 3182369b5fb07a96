"""Trajectory and playback API schemas."""

import math
from typing import List, Optional

from pydantic import BaseModel, Field

from src.playback.interpolator import AnimationState
from src.trajectory.legs import TrajectoryLeg, TrajectorySummary

from .common import EnvironmentModel, GeoPointModel, ShipModel, WaypointModel


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


class TrajectoryRequest(BaseModel):
    """Inputs for leg calculation."""
    waypoints: List[WaypointModel]
    ship: Optional[ShipModel] = None  # Configured default ship when omitted
    pivot_duration_s: Optional[float] = Field(None, ge=0, description="Pivot time on propulsion reversal")
    environment: EnvironmentModel = Field(default_factory=EnvironmentModel)


class PlaybackStateRequest(TrajectoryRequest):
    """Inputs for a single playback frame."""
    progress: float = Field(..., ge=0, le=1, description="Fraction of transit elapsed")


class TrajectoryLegModel(BaseModel):
    """One derived leg."""
    id: int
    start: WaypointModel
    end: WaypointModel
    distance_m: float
    curve_distance_m: float
    course_deg: float
    start_heading_deg: float
    end_heading_deg: float
    command: str
    turn_angle_deg: float
    turn_radius_m: Optional[float] = None  # None when straight
    turn_radius_violation: bool
    speed_kts: float
    time_s: float
    pivot_time_s: float
    propulsion: str

    # Drift
    sog_kts: Optional[float] = None
    cog_deg: Optional[float] = None
    predicted_end: Optional[GeoPointModel] = None
    course_correction_deg: Optional[float] = None
    course_maintainable: Optional[bool] = None

    @classmethod
    def from_leg(cls, leg: TrajectoryLeg) -> "TrajectoryLegModel":
        correction = leg.course_correction
        return cls(
            id=leg.id,
            start=WaypointModel(**leg.start.to_dict()),
            end=WaypointModel(**leg.end.to_dict()),
            distance_m=leg.distance,
            curve_distance_m=leg.curve_distance,
            course_deg=leg.course,
            start_heading_deg=leg.start_heading,
            end_heading_deg=leg.end_heading,
            command=leg.command.value,
            turn_angle_deg=leg.turn_angle,
            turn_radius_m=_finite_or_none(leg.turn_radius),
            turn_radius_violation=leg.turn_radius_violation,
            speed_kts=leg.speed,
            time_s=leg.time,
            pivot_time_s=leg.pivot_time,
            propulsion=leg.propulsion.value,
            sog_kts=leg.sog,
            cog_deg=leg.cog_course,
            predicted_end=(
                GeoPointModel(lat=leg.predicted_end.lat, lng=leg.predicted_end.lng)
                if leg.predicted_end is not None else None
            ),
            course_correction_deg=correction.angle_deg if correction is not None else None,
            course_maintainable=correction.maintainable if correction is not None else None,
        )


class TrajectorySummaryModel(BaseModel):
    leg_count: int
    total_distance_m: float
    total_curve_distance_m: float
    total_time_s: float
    total_pivot_time_s: float
    violation_count: int

    @classmethod
    def from_summary(cls, summary: TrajectorySummary) -> "TrajectorySummaryModel":
        return cls(
            leg_count=summary.leg_count,
            total_distance_m=summary.total_distance_m,
            total_curve_distance_m=summary.total_curve_distance_m,
            total_time_s=summary.total_time_s,
            total_pivot_time_s=summary.total_pivot_time_s,
            violation_count=summary.violation_count,
        )


class TrajectoryResponse(BaseModel):
    legs: List[TrajectoryLegModel]
    summary: TrajectorySummaryModel


class AnimationStateModel(BaseModel):
    position: GeoPointModel
    heading_deg: float
    speed_kts: float

    @classmethod
    def from_state(cls, state: AnimationState) -> "AnimationStateModel":
        return cls(
            position=GeoPointModel(lat=state.position.lat, lng=state.position.lng),
            heading_deg=state.heading,
            speed_kts=state.speed,
        )


class PlaybackStateResponse(BaseModel):
    state: Optional[AnimationStateModel] = None
    progress: float
    total_duration_s: float
