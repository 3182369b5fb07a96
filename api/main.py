"""
FastAPI Backend for the Harbor Trajectory Planner.

Provides REST API endpoints for:
- Trajectory leg calculation (turn commands, radius checks, timing, drift)
- Playback frame interpolation
- Plan file import/export

The API is stateless: the map front-end owns the plan and sends it with
every request.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.config import settings
from api.routers import plans, system, trajectory
from api.routers.system import API_NAME, API_VERSION

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the trajectory planner API.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title=API_NAME,
        description="""
## Harbor Trajectory Planning API

Derives navigable trajectories from user-placed waypoints.

### Features
- Catmull-Rom path shaping with turning-radius checks
- Port/starboard/straight turn commands
- Pivot timing on propulsion reversal
- Wind and current drift with course-correction angles
- Time-accurate playback interpolation
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # CORS middleware - use configured origins only (NO WILDCARDS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

    application.include_router(system.router)
    application.include_router(trajectory.router)
    application.include_router(plans.router)

    return application


app = create_app()


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level,
    )
