"""Reshape aggregated statistics into the public export schema."""

from typing import Any, Dict, Mapping
import structlog

logger = structlog.get_logger()

USER_FIELDS = ("id", "email", "full_name")

SUMMARY_FIELDS = (
    "totalModulesCompleted",
    "totalQuizzesTaken",
    "totalQuizzesPassed",
    "averageScore",
    "totalAchievements",
)


def format_export_bundle(user: Mapping[str, Any], stats: Mapping[str, Any]) -> Dict[str, Any]:
    """Build the export bundle for ``user`` from aggregated ``stats``.

    Only the public user fields are copied. Collections and summary totals are
    passed through untouched; totals are trusted as computed upstream.
    """
    achievements = stats["achievements"]
    if len(achievements) != stats["totalAchievements"]:
        logger.warning(
            "Achievement total does not match exported achievements",
            user_id=user["id"],
            total=stats["totalAchievements"],
            exported=len(achievements)
        )

    return {
        "user": {field: user[field] for field in USER_FIELDS},
        "progress": stats["progressByPath"],
        "quizzes": stats["recentQuizzes"],
        "achievements": achievements,
        "summary": {field: stats[field] for field in SUMMARY_FIELDS},
    }
