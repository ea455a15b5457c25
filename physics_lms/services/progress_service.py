"""Career path progress and quiz tracking."""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
import structlog

from physics_lms.core.config import settings
from physics_lms.core.exceptions import NotFoundError
from physics_lms.gamification.achievement_engine import AchievementEngine
from physics_lms.models.achievement import UserAchievement
from physics_lms.models.progress import UserProgress
from physics_lms.models.quiz import QuizResult
from physics_lms.schemas.progress import QuizResultCreate

logger = structlog.get_logger()


class ProgressService:
    """Reads and advances a user's progress through career path modules."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def validate_career_path(career_path: str) -> str:
        if career_path not in settings.CAREER_PATHS:
            raise NotFoundError(f"Unknown career path: {career_path}")
        return career_path

    async def get_progress(self, user_id: str, career_path: str) -> UserProgress:
        """Get progress for a path, creating the default record when missing."""
        progress, created = await self._get_or_stage_progress(user_id, career_path)
        if created:
            await self.db.commit()
            await self.db.refresh(progress)
            logger.info("Progress created", user_id=user_id, career_path=career_path)

        return progress

    async def complete_module(self, user_id: str, career_path: str, module_id: int) -> Dict[str, Any]:
        """Mark a module completed, advance the current module and award achievements."""
        self.validate_career_path(career_path)

        try:
            progress, earned = await self._stage_module_completion(user_id, career_path, module_id)
            await self.db.commit()
            await self.db.refresh(progress)
        except Exception as e:
            logger.error("Failed to update progress", user_id=user_id, error=str(e))
            await self.db.rollback()
            raise

        logger.info(
            "Module completed",
            user_id=user_id,
            career_path=career_path,
            module_id=module_id,
            completed_modules=progress.completed_modules
        )
        return {"progress": progress, "earned_achievements": earned}

    async def is_module_unlocked(self, user_id: str, career_path: str, module_id: int) -> bool:
        """Module 1 is always open; later modules need the previous one done."""
        self.validate_career_path(career_path)
        if module_id <= 1:
            return True

        progress = await self.get_progress(user_id, career_path)
        completed = progress.completed_modules or []
        return (module_id - 1) in completed or progress.current_module >= module_id

    async def save_quiz_result(self, user_id: str, result: QuizResultCreate) -> Dict[str, Any]:
        """Store a quiz attempt; a passing attempt also completes the module.

        The quiz row, progress change and any achievements commit together.
        """
        self.validate_career_path(result.career_path)

        earned: List[Dict[str, Any]] = []
        quiz_result = QuizResult(user_id=user_id, **result.model_dump())

        try:
            if result.passed:
                _, earned = await self._stage_module_completion(
                    user_id, result.career_path, result.module_id
                )
            self.db.add(quiz_result)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(quiz_result)
        except Exception as e:
            logger.error("Failed to save quiz result", user_id=user_id, error=str(e))
            await self.db.rollback()
            raise

        logger.info(
            "Quiz result saved",
            user_id=user_id,
            module_id=result.module_id,
            score=result.score,
            passed=result.passed
        )
        return {"result": quiz_result, "earned_achievements": earned}

    async def get_quiz_results(self, user_id: str, career_path: Optional[str] = None) -> List[QuizResult]:
        """Quiz results for a user, newest first."""
        query = select(QuizResult).where(QuizResult.user_id == user_id)
        if career_path:
            self.validate_career_path(career_path)
            query = query.where(QuizResult.career_path == career_path)

        result = await self.db.execute(query.order_by(QuizResult.completed_at.desc()))
        return list(result.scalars().all())

    async def get_user_achievements(self, user_id: str) -> List[UserAchievement]:
        result = await self.db.execute(
            select(UserAchievement)
            .options(selectinload(UserAchievement.achievement))
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.earned_at)
        )
        return list(result.scalars().all())

    async def _find_progress(self, user_id: str, career_path: str) -> Optional[UserProgress]:
        result = await self.db.execute(
            select(UserProgress).where(
                and_(
                    UserProgress.user_id == user_id,
                    UserProgress.career_path == career_path
                )
            )
        )
        return result.scalar_one_or_none()

    async def _get_or_stage_progress(self, user_id: str, career_path: str):
        """Find the progress row, adding and flushing a default one when missing.

        Returns ``(progress, created)``; the caller decides when to commit.
        """
        self.validate_career_path(career_path)

        progress = await self._find_progress(user_id, career_path)
        if progress is not None:
            return progress, False

        progress = UserProgress(
            user_id=user_id,
            career_path=career_path,
            completed_modules=[],
            current_module=1
        )
        self.db.add(progress)
        await self.db.flush()
        return progress, True

    async def _stage_module_completion(self, user_id: str, career_path: str, module_id: int):
        """Apply a module completion and its achievements without committing."""
        progress, _ = await self._get_or_stage_progress(user_id, career_path)

        completed = sorted(set(progress.completed_modules or []) | {module_id})
        # Assign a new list so the JSON column registers the change
        progress.completed_modules = completed
        progress.current_module = module_id + 1

        earned = await AchievementEngine(self.db).check_and_award_achievements(
            user_id, career_path, len(completed)
        )
        await self.db.flush()
        return progress, earned
