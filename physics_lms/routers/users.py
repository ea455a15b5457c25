"""User account endpoints."""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import structlog

from physics_lms.core.dependencies import get_session_claims, get_user_service
from physics_lms.core.exceptions import NotFoundError, ValidationError, error_message
from physics_lms.schemas.user import UpdateUserNameRequest
from physics_lms.services.user_service import UserService

logger = structlog.get_logger()
router = APIRouter()


def _failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"success": False, "error": error}, status_code=status_code)


@router.post("/update-user-name")
async def update_user_name(
    body: UpdateUserNameRequest,
    claims: Optional[Dict[str, Any]] = Depends(get_session_claims),
    users: UserService = Depends(get_user_service)
):
    """Update a user's display name."""
    if not body.userId or not body.newName:
        return _failure("User ID and new name are required", status.HTTP_400_BAD_REQUEST)

    try:
        current_user = await users.get_current_user(claims)
        if not current_user:
            return _failure("Authentication required", status.HTTP_401_UNAUTHORIZED)

        # Verify user is renaming themselves or is an admin
        if current_user.id != body.userId and "admin" not in current_user.roles:
            return _failure("Not authorized", status.HTTP_403_FORBIDDEN)

        await users.update_user_name(body.userId, body.newName)

    except ValidationError as e:
        return _failure(e.message, status.HTTP_400_BAD_REQUEST)
    except NotFoundError as e:
        return _failure(e.message, status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.error("Error in update-user-name", error=str(e), exc_info=True)
        return _failure(
            error_message(e, default="An unexpected error occurred"),
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return {"success": True, "message": "User name updated successfully"}


@router.post("/delete-account")
async def delete_account(
    claims: Optional[Dict[str, Any]] = Depends(get_session_claims),
    users: UserService = Depends(get_user_service)
):
    """Delete all data stored for the current user."""
    if not claims:
        return JSONResponse(
            content={"error": "Not authenticated"},
            status_code=status.HTTP_401_UNAUTHORIZED
        )

    user_id = str(claims["sub"])
    try:
        logger.info("Starting account deletion", user_id=user_id)
        await users.delete_account(user_id)
    except Exception as e:
        logger.error("Error deleting account", user_id=user_id, error=str(e), exc_info=True)
        return JSONResponse(
            content={"error": "Server error", "details": error_message(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return {"success": True, "message": "User data deleted successfully"}
