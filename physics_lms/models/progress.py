"""Career path progress models."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, UniqueConstraint, Index, JSON
import uuid

from physics_lms.core.database import Base


class UserProgress(Base):
    """Per career path completion state for a user."""
    __tablename__ = "user_progress"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    career_path = Column(String, nullable=False)
    completed_modules = Column(JSON, nullable=False, default=list)  # sorted module ids
    current_module = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "career_path"),
        Index("ix_user_progress_user_path", "user_id", "career_path"),
    )
