"""
Trajectory API router.

Stateless leg calculation and playback-frame interpolation. Every
request carries the full plan; nothing is stored between calls.
"""

import logging

from fastapi import APIRouter, HTTPException

from api.config import settings
from api.schemas import (
    AnimationStateModel,
    PlaybackStateRequest,
    PlaybackStateResponse,
    TrajectoryLegModel,
    TrajectoryRequest,
    TrajectoryResponse,
    TrajectorySummaryModel,
)
from src.config import settings as core_settings
from src.playback.interpolator import interpolate, total_duration
from src.trajectory.legs import build_legs, summarize_legs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trajectory", tags=["Trajectory"])


def _compute(request: TrajectoryRequest):
    """Build legs for a request, returning (waypoints, legs)."""
    if len(request.waypoints) > settings.max_waypoints:
        raise HTTPException(
            status_code=400,
            detail=f"Too many waypoints: {len(request.waypoints)} (max {settings.max_waypoints})",
        )

    ids = [wp.id for wp in request.waypoints]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=400, detail="Waypoint ids must be unique")

    pivot_duration = (
        request.pivot_duration_s
        if request.pivot_duration_s is not None
        else core_settings.pivot_duration_s
    )
    waypoints = [wp.to_waypoint() for wp in request.waypoints]
    legs = build_legs(
        waypoints,
        request.ship.to_ship() if request.ship is not None else core_settings.default_ship(),
        pivot_duration,
        request.environment.to_environment(),
    )
    return waypoints, legs


@router.post("", response_model=TrajectoryResponse)
async def calculate_trajectory(request: TrajectoryRequest):
    """
    Calculate trajectory legs for a list of waypoints.

    Returns one leg per waypoint pair plus a terminal END leg, with
    turn commands, turning-radius violations, timing and (when drift is
    enabled) ground track predictions.
    """
    _, legs = _compute(request)
    logger.info(f"Calculated {len(legs)} legs for {len(request.waypoints)} waypoints")

    return TrajectoryResponse(
        legs=[TrajectoryLegModel.from_leg(leg) for leg in legs],
        summary=TrajectorySummaryModel.from_summary(summarize_legs(legs)),
    )


@router.post("/state", response_model=PlaybackStateResponse)
async def playback_state(request: PlaybackStateRequest):
    """
    Interpolate the simulated vessel state at a fraction of the transit.

    ``state`` is null when the plan has fewer than two waypoints.
    """
    waypoints, legs = _compute(request)
    duration = total_duration(legs)
    state = interpolate(legs, waypoints, request.progress, duration)

    return PlaybackStateResponse(
        state=AnimationStateModel.from_state(state) if state is not None else None,
        progress=request.progress,
        total_duration_s=duration,
    )
