"""User resolution and account management."""

from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete
import structlog

from physics_lms.core.config import settings
from physics_lms.core.exceptions import NotFoundError, ValidationError
from physics_lms.models.achievement import UserAchievement
from physics_lms.models.progress import UserProgress
from physics_lms.models.quiz import QuizResult
from physics_lms.models.user import User
from physics_lms.schemas.user import CurrentUser

logger = structlog.get_logger()


class UserService:
    """Resolves session users and manages their stored records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_current_user(self, claims: Optional[Dict[str, Any]]) -> Optional[CurrentUser]:
        """Resolve the authenticated user for a set of session claims.

        Returns None when there is no session. The user record (and default
        progress for every career path) is created the first time a subject
        is seen. Database errors propagate.
        """
        if not claims or not claims.get("sub"):
            return None

        user_id = str(claims["sub"])
        metadata = claims.get("user_metadata") or {}
        email = claims.get("email") or ""
        full_name = claims.get("full_name") or metadata.get("full_name") or "User"

        user = await self.initialize_user_if_needed(user_id, email, full_name)

        roles = claims.get("roles") or ([claims["role"]] if claims.get("role") else [])
        current = CurrentUser.model_validate(user)
        current.roles = list(roles)
        return current

    async def get_user(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def initialize_user_if_needed(self, user_id: str, email: str, full_name: str) -> User:
        """Get the user record, creating it with initial progress when missing."""
        user = await self.get_user(user_id)
        if user:
            return user

        user = User(id=user_id, email=email, full_name=full_name)
        self.db.add(user)
        for path in settings.CAREER_PATHS:
            self.db.add(UserProgress(
                user_id=user_id,
                career_path=path,
                completed_modules=[],
                current_module=1
            ))

        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent first request created the records already
            await self.db.rollback()
            user = await self.get_user(user_id)
            if user is None:
                raise
            return user

        logger.info("User initialized", user_id=user_id, career_paths=settings.CAREER_PATHS)
        return user

    async def update_user_name(self, user_id: str, new_name: str) -> User:
        """Change a user's display name."""
        name = (new_name or "").strip()
        if len(name) < settings.MIN_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at least {settings.MIN_NAME_LENGTH} characters long"
            )

        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        user.full_name = name
        try:
            await self.db.commit()
        except Exception as e:
            logger.error("Failed to update user name", user_id=user_id, error=str(e))
            await self.db.rollback()
            raise

        logger.info("User name updated", user_id=user_id)
        return user

    async def delete_account(self, user_id: str) -> bool:
        """Delete all stored data for a user.

        Returns whether a user record existed.
        """
        existed = await self.get_user(user_id) is not None

        try:
            await self.db.execute(delete(UserAchievement).where(UserAchievement.user_id == user_id))
            await self.db.execute(delete(QuizResult).where(QuizResult.user_id == user_id))
            await self.db.execute(delete(UserProgress).where(UserProgress.user_id == user_id))
            await self.db.execute(delete(User).where(User.id == user_id))
            await self.db.commit()
        except Exception as e:
            logger.error("Failed to delete account", user_id=user_id, error=str(e))
            await self.db.rollback()
            raise

        logger.info("Account deleted", user_id=user_id, had_user_record=existed)
        return existed
