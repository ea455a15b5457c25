"""Progress, quiz and achievement endpoints."""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
import structlog

from physics_lms.core.dependencies import get_current_user, get_progress_service
from physics_lms.core.exceptions import NotFoundError
from physics_lms.schemas.achievement import AchievementInfo, UserAchievementResponse
from physics_lms.schemas.progress import (
    ProgressResponse, ModuleUnlockResponse, QuizResultCreate, QuizResultResponse
)
from physics_lms.schemas.user import CurrentUser
from physics_lms.services.progress_service import ProgressService

logger = structlog.get_logger()
router = APIRouter()


def _not_found(error: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)


@router.get("/progress/{career_path}", response_model=ProgressResponse)
async def get_progress(
    career_path: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Get the current user's progress in a career path."""
    try:
        return await service.get_progress(current_user.id, career_path)
    except NotFoundError as e:
        raise _not_found(e)


@router.post("/progress/{career_path}/modules/{module_id}/complete", response_model=Dict[str, Any])
async def complete_module(
    career_path: str,
    module_id: int = Path(..., ge=1),
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Mark a module as completed."""
    try:
        result = await service.complete_module(current_user.id, career_path, module_id)
    except NotFoundError as e:
        raise _not_found(e)

    return {
        "progress": ProgressResponse.model_validate(result["progress"]).model_dump(mode="json"),
        "earned_achievements": result["earned_achievements"]
    }


@router.get("/progress/{career_path}/modules/{module_id}/unlocked", response_model=ModuleUnlockResponse)
async def is_module_unlocked(
    career_path: str,
    module_id: int = Path(..., ge=1),
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Check whether a module is available to the current user."""
    try:
        unlocked = await service.is_module_unlocked(current_user.id, career_path, module_id)
    except NotFoundError as e:
        raise _not_found(e)

    return ModuleUnlockResponse(career_path=career_path, module_id=module_id, unlocked=unlocked)


@router.post("/quizzes", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def save_quiz_result(
    result: QuizResultCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """Record a quiz attempt for the current user."""
    try:
        saved = await service.save_quiz_result(current_user.id, result)
    except NotFoundError as e:
        raise _not_found(e)

    return {
        "result": QuizResultResponse.model_validate(saved["result"]).model_dump(mode="json"),
        "earned_achievements": saved["earned_achievements"]
    }


@router.get("/quizzes", response_model=List[QuizResultResponse])
async def get_quiz_results(
    career_path: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """List the current user's quiz results, newest first."""
    try:
        return await service.get_quiz_results(current_user.id, career_path)
    except NotFoundError as e:
        raise _not_found(e)


@router.get("/achievements", response_model=List[UserAchievementResponse])
async def get_achievements(
    current_user: CurrentUser = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service)
):
    """List achievements earned by the current user."""
    earned = await service.get_user_achievements(current_user.id)
    return [
        UserAchievementResponse(
            id=a.id,
            earned_at=a.earned_at,
            achievements=AchievementInfo.model_validate(a.achievement) if a.achievement else None
        )
        for a in earned
    ]
