"""User data export endpoint."""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import structlog

from physics_lms.core.dependencies import (
    get_session_claims, get_statistics_service, get_user_service
)
from physics_lms.core.exceptions import error_message
from physics_lms.export.formatter import format_export_bundle
from physics_lms.services.statistics_service import StatisticsService
from physics_lms.services.user_service import UserService

logger = structlog.get_logger()
router = APIRouter()


@router.get("/export-data")
async def export_data(
    claims: Optional[Dict[str, Any]] = Depends(get_session_claims),
    users: UserService = Depends(get_user_service),
    statistics: StatisticsService = Depends(get_statistics_service)
):
    """Export the current user's progress, quiz history and achievements."""
    try:
        user = await users.get_current_user(claims)

        if not user:
            return JSONResponse(
                content={"success": False, "message": "Authentication required"},
                status_code=status.HTTP_401_UNAUTHORIZED
            )

        stats = await statistics.get_user_statistics(user.id)
        export = format_export_bundle(user.model_dump(), stats)

        logger.info("User data exported", user_id=user.id)
        return {"success": True, "data": export}

    except Exception as e:
        logger.error("Error exporting user data", error=str(e), exc_info=True)
        return JSONResponse(
            content={
                "success": False,
                "message": "Failed to export user data",
                "error": error_message(e)
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
