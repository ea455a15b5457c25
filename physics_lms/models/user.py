"""User account model."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime

from physics_lms.core.database import Base


class User(Base):
    """Learner account, keyed by the identity provider's subject id."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, default="")
    full_name = Column(String, nullable=False, default="User")
    avatar_url = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
