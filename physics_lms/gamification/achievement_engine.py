"""Achievement awarding engine."""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
import structlog

from physics_lms.core.config import settings
from physics_lms.models.achievement import Achievement, UserAchievement

logger = structlog.get_logger()


@dataclass(frozen=True)
class AchievementRule:
    """An achievement earned once a path has enough completed modules."""
    id: str
    name: str
    description: str
    icon: str
    min_completed: int

    @property
    def condition(self) -> str:
        return f"completed_modules >= {self.min_completed}"


def achievement_rules(career_path: str) -> List[AchievementRule]:
    """Achievement rules checked after a module in ``career_path`` is completed."""
    return [
        AchievementRule(
            id="first_module",
            name="First Step",
            description="Complete your first module",
            icon="rocket",
            min_completed=1,
        ),
        AchievementRule(
            id="five_modules",
            name="Halfway There",
            description=f"Complete {settings.HALFWAY_MODULES} modules",
            icon="milestone",
            min_completed=settings.HALFWAY_MODULES,
        ),
        AchievementRule(
            id=f"{career_path}_master",
            name=f"{career_path.capitalize()} Master",
            description=f"Complete all modules in the {career_path} path",
            icon="award",
            min_completed=settings.MODULES_PER_PATH,
        ),
    ]


class AchievementEngine:
    """Engine for checking and awarding achievements."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check_and_award_achievements(
        self,
        user_id: str,
        career_path: str,
        completed_modules: int
    ) -> List[Dict[str, Any]]:
        """Award every achievement whose condition is met and not yet earned.

        The caller owns the transaction; new rows are flushed, not committed.
        """
        earned = []

        for rule in achievement_rules(career_path):
            if completed_modules < rule.min_completed:
                continue

            user_achievement = await self._award_achievement(user_id, rule)
            if user_achievement:
                earned.append({
                    "achievement_id": rule.id,
                    "name": rule.name,
                    "description": rule.description,
                    "icon": rule.icon
                })

        return earned

    async def _ensure_definition(self, rule: AchievementRule) -> Achievement:
        achievement = await self.db.get(Achievement, rule.id)
        if achievement is None:
            achievement = Achievement(
                id=rule.id,
                name=rule.name,
                description=rule.description,
                icon=rule.icon,
                condition=rule.condition
            )
            self.db.add(achievement)
            await self.db.flush()
        return achievement

    async def _award_achievement(self, user_id: str, rule: AchievementRule) -> Optional[UserAchievement]:
        """Award achievement to user if not already earned."""
        result = await self.db.execute(
            select(UserAchievement).where(
                and_(
                    UserAchievement.user_id == user_id,
                    UserAchievement.achievement_id == rule.id
                )
            )
        )
        if result.scalar_one_or_none():
            return None

        await self._ensure_definition(rule)

        user_achievement = UserAchievement(user_id=user_id, achievement_id=rule.id)
        self.db.add(user_achievement)
        await self.db.flush()

        logger.info("Achievement awarded", user_id=user_id, achievement=rule.id)
        return user_achievement
