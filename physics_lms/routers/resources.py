"""Learning resource endpoints."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
import structlog

from physics_lms.core.dependencies import get_resource_service
from physics_lms.core.exceptions import error_message
from physics_lms.services.resource_service import ResourceService

logger = structlog.get_logger()
router = APIRouter()


@router.get("/seed-resources")
async def seed_resources(service: ResourceService = Depends(get_resource_service)):
    """Insert the sample learning resources."""
    try:
        resources = await service.seed_sample_resources()
    except Exception as e:
        logger.error("Error seeding resources", error=str(e), exc_info=True)
        return JSONResponse(
            content={
                "success": False,
                "message": "Failed to seed resources",
                "error": error_message(e)
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return {
        "success": True,
        "message": "Sample resources created successfully",
        "count": len(resources),
        "resources": resources
    }


@router.get("/resources/recommended")
async def get_recommended_resources(
    module_id: int = Query(..., ge=1),
    career_path: str = Query(...),
    service: ResourceService = Depends(get_resource_service)
):
    """Resources recommended for a module."""
    return await service.get_recommended_resources(module_id, career_path)
