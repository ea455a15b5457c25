"""Data models for the Physics LMS service."""

from physics_lms.models.user import User
from physics_lms.models.progress import UserProgress
from physics_lms.models.quiz import QuizResult
from physics_lms.models.achievement import Achievement, UserAchievement
from physics_lms.models.resource import LearningResource

__all__ = [
    "User",
    "UserProgress",
    "QuizResult",
    "Achievement",
    "UserAchievement",
    "LearningResource"
]
