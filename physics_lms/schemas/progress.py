"""Progress and quiz schemas."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    career_path: str
    completed_modules: List[int] = Field(default_factory=list)
    current_module: int = 1
    updated_at: Optional[datetime] = None


class ModuleUnlockResponse(BaseModel):
    career_path: str
    module_id: int
    unlocked: bool


class QuizResultCreate(BaseModel):
    """A quiz submission from the client."""
    module_id: int = Field(..., ge=1)
    career_path: str
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    passed: bool
    time_taken_sec: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def score_within_total(self):
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self


class QuizResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    module_id: int
    career_path: str
    score: int
    total_questions: int
    passed: bool
    time_taken_sec: Optional[int] = None
    completed_at: Optional[datetime] = None
