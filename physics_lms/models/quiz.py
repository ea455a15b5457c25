"""Quiz result model."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean, Index
import uuid

from physics_lms.core.database import Base


class QuizResult(Base):
    """A scored attempt at a module quiz."""
    __tablename__ = "quiz_results"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    module_id = Column(Integer, nullable=False)
    career_path = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False, default=False)
    time_taken_sec = Column(Integer)
    completed_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_quiz_results_user_completed", "user_id", "completed_at"),
    )
