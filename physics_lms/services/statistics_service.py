"""Per-user learning statistics aggregation."""

from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
import structlog

from physics_lms.core.config import settings
from physics_lms.models.achievement import UserAchievement
from physics_lms.models.progress import UserProgress
from physics_lms.models.quiz import QuizResult
from physics_lms.schemas.achievement import AchievementInfo, UserAchievementResponse
from physics_lms.schemas.progress import ProgressResponse, QuizResultResponse

logger = structlog.get_logger()


class StatisticsService:
    """Aggregates progress, quiz history and achievements for a user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_statistics(self, user_id: str) -> Dict[str, Any]:
        """Compute statistics for a user from current database state.

        Raw collections are returned as JSON-ready dicts; totals are computed
        over the complete quiz history even though ``recentQuizzes`` is
        truncated.
        """
        progress = await self._get_progress(user_id)
        quizzes = await self._get_quizzes(user_id)
        achievements = await self._get_achievements(user_id)

        total_modules_completed = sum(len(p.completed_modules or []) for p in progress)
        total_quizzes_taken = len(quizzes)
        total_quizzes_passed = sum(1 for q in quizzes if q.passed)

        stats = {
            "totalModulesCompleted": total_modules_completed,
            "totalQuizzesTaken": total_quizzes_taken,
            "totalQuizzesPassed": total_quizzes_passed,
            "averageScore": self.calculate_average_score(quizzes),
            "totalAchievements": len(achievements),
            "progressByPath": [
                ProgressResponse.model_validate(p).model_dump(mode="json") for p in progress
            ],
            "recentQuizzes": [
                QuizResultResponse.model_validate(q).model_dump(mode="json")
                for q in quizzes[:settings.RECENT_QUIZZES_LIMIT]
            ],
            "achievements": [self._serialize_achievement(a) for a in achievements],
        }

        logger.debug(
            "User statistics computed",
            user_id=user_id,
            quizzes=total_quizzes_taken,
            achievements=stats["totalAchievements"]
        )
        return stats

    @staticmethod
    def calculate_average_score(quizzes: List[QuizResult]) -> float:
        """Mean percentage score across quiz results, 0 when there are none."""
        if not quizzes:
            return 0
        percentages = [
            (q.score / q.total_questions) * 100 if q.total_questions else 0
            for q in quizzes
        ]
        return sum(percentages) / len(percentages)

    async def _get_progress(self, user_id: str) -> List[UserProgress]:
        result = await self.db.execute(
            select(UserProgress)
            .where(UserProgress.user_id == user_id)
            .order_by(UserProgress.career_path)
        )
        return list(result.scalars().all())

    async def _get_quizzes(self, user_id: str) -> List[QuizResult]:
        result = await self.db.execute(
            select(QuizResult)
            .where(QuizResult.user_id == user_id)
            .order_by(QuizResult.completed_at.desc())
        )
        return list(result.scalars().all())

    async def _get_achievements(self, user_id: str) -> List[UserAchievement]:
        result = await self.db.execute(
            select(UserAchievement)
            .options(selectinload(UserAchievement.achievement))
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.earned_at)
        )
        return list(result.unique().scalars().all())

    @staticmethod
    def _serialize_achievement(user_achievement: UserAchievement) -> Dict[str, Any]:
        info = None
        if user_achievement.achievement is not None:
            info = AchievementInfo.model_validate(user_achievement.achievement)
        return UserAchievementResponse(
            id=user_achievement.id,
            earned_at=user_achievement.earned_at,
            achievements=info
        ).model_dump(mode="json")
