"""Learning resource model."""

from sqlalchemy import Column, String, Integer, Index
import uuid

from physics_lms.core.database import Base


class LearningResource(Base):
    """External reading or viewing material attached to a module."""
    __tablename__ = "learning_resources"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    url = Column(String, nullable=False)
    resource_type = Column(String, nullable=False)  # ebook, video, article
    module_id = Column(Integer, nullable=False)
    career_path = Column(String, nullable=False)

    __table_args__ = (
        Index("ix_learning_resources_module_path", "module_id", "career_path"),
    )
