"""
Plan file API router.

Handles plan export (download as JSON) and import (upload JSON file).
Only waypoints and ship are exchanged; environment and pivot settings
stay with the client.
"""

import logging

from fastapi import APIRouter, File, HTTPException, Response, UploadFile
from pydantic import ValidationError

from api.config import settings
from api.schemas import SavedPlanModel
from src.routes.plan import PLAN_FILENAME, PlanFormatError, dumps_plan, loads_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["Plans"])


@router.post("/export")
async def export_plan(plan: SavedPlanModel):
    """
    Export a plan as a downloadable JSON file.
    """
    content = dumps_plan(plan.to_plan())
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{PLAN_FILENAME}"'},
    )


@router.post("/import", response_model=SavedPlanModel)
async def import_plan(file: UploadFile = File(...)):
    """
    Parse an uploaded plan file.

    Older files without a turning radius get the 300 m default.
    Missing waypoint speeds and propulsion directions are defaulted.
    """
    content = await file.read()

    if len(content) > settings.max_plan_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_plan_size_bytes // 1024} KB",
        )

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        plan = loads_plan(content)
        imported = SavedPlanModel.from_plan(plan)
    except (PlanFormatError, ValidationError) as e:
        logger.error(f"Failed to import plan {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid plan file: {e}")

    logger.info(f"Imported plan with {len(plan.waypoints)} waypoints")
    return imported
