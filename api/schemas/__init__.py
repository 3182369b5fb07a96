"""
Trajectory planner API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import WaypointModel, TrajectoryRequest, ...
"""

# Common
from .common import (  # noqa: F401
    GeoPointModel,
    WaypointModel,
    ShipModel,
    ForcingModel,
    EnvironmentModel,
)

# Trajectory
from .trajectory import (  # noqa: F401
    TrajectoryRequest,
    PlaybackStateRequest,
    TrajectoryLegModel,
    TrajectorySummaryModel,
    TrajectoryResponse,
    AnimationStateModel,
    PlaybackStateResponse,
)

# Plans
from .plan import SavedPlanModel  # noqa: F401
