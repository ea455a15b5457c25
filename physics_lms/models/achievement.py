"""Achievement models."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
import uuid

from physics_lms.core.database import Base


class Achievement(Base):
    """Achievement definitions."""
    __tablename__ = "achievements"

    id = Column(String, primary_key=True)  # slug, e.g. "first_module"
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    icon = Column(String)
    condition = Column(String)

    # Relationships
    user_achievements = relationship("UserAchievement", back_populates="achievement")


class UserAchievement(Base):
    """Achievements earned by users."""
    __tablename__ = "user_achievements"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    achievement_id = Column(String, ForeignKey("achievements.id"), nullable=False)
    earned_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    achievement = relationship("Achievement", back_populates="user_achievements")

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id"),
        Index("ix_user_achievement_earned", "earned_at"),
    )
