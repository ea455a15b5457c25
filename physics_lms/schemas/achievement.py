"""Achievement schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class AchievementInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    icon: Optional[str] = None


class UserAchievementResponse(BaseModel):
    """Earned achievement with its definition nested under ``achievements``."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    earned_at: Optional[datetime] = None
    achievements: Optional[AchievementInfo] = None
