"""
System API router.

Handles the root endpoint and health checks.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from api.config import settings
from src.playback.driver import PLAYBACK_SPEEDS

router = APIRouter(tags=["System"])

logger = logging.getLogger(__name__)

API_NAME = "Harbor Trajectory Planner API"
API_VERSION = "1.0.0"


@router.get("/")
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "trajectory": "/api/trajectory",
            "playback": "/api/trajectory/state",
            "plans": "/api/plans/...",
        },
    }


@router.get("/api/health")
async def health_check():
    """
    Liveness check for load balancers.

    The API holds no external dependencies, so a response means healthy.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "environment": settings.environment,
    }


@router.get("/api/playback/speeds")
async def playback_speeds():
    """Selectable playback speed multipliers."""
    return {"speeds": list(PLAYBACK_SPEEDS)}
