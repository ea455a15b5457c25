"""Tests for GET /api/export-data."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from physics_lms.core.dependencies import get_statistics_service, get_user_service
from physics_lms.main import app
from physics_lms.schemas.progress import QuizResultCreate
from physics_lms.schemas.user import CurrentUser
from physics_lms.services.progress_service import ProgressService

ANN_STATS = {
    "progressByPath": [],
    "recentQuizzes": [],
    "achievements": [],
    "totalModulesCompleted": 3,
    "totalQuizzesTaken": 5,
    "totalQuizzesPassed": 4,
    "averageScore": 82,
    "totalAchievements": 2,
}


class TestExportWithStubbedCollaborators:
    """Export endpoint with the resolver and aggregator replaced by mocks."""

    @pytest.fixture
    def users(self):
        service = MagicMock()
        service.get_current_user = AsyncMock(
            return_value=CurrentUser(id="u1", email="a@b.com", full_name="Ann")
        )
        return service

    @pytest.fixture
    def statistics(self):
        service = MagicMock()
        service.get_user_statistics = AsyncMock(return_value=dict(ANN_STATS))
        return service

    @pytest.fixture(autouse=True)
    def override_services(self, client, users, statistics):
        app.dependency_overrides[get_user_service] = lambda: users
        app.dependency_overrides[get_statistics_service] = lambda: statistics

    async def test_authenticated_export(self, client, statistics):
        response = await client.get("/api/export-data")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "user": {"id": "u1", "email": "a@b.com", "full_name": "Ann"},
                "progress": [],
                "quizzes": [],
                "achievements": [],
                "summary": {
                    "totalModulesCompleted": 3,
                    "totalQuizzesTaken": 5,
                    "totalQuizzesPassed": 4,
                    "averageScore": 82,
                    "totalAchievements": 2,
                },
            },
        }
        statistics.get_user_statistics.assert_awaited_once_with("u1")

    async def test_no_session_returns_401_without_aggregation(self, client, users, statistics):
        users.get_current_user.return_value = None

        response = await client.get("/api/export-data")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required"}
        statistics.get_user_statistics.assert_not_called()

    async def test_user_record_extra_fields_are_dropped(self, client, users):
        users.get_current_user.return_value = CurrentUser(
            id="u1",
            email="a@b.com",
            full_name="Ann",
            avatar_url="https://example.com/ann.png",
            roles=["admin"],
        )

        response = await client.get("/api/export-data")

        assert response.json()["data"]["user"] == {"id": "u1", "email": "a@b.com", "full_name": "Ann"}

    async def test_aggregation_failure_returns_500(self, client, statistics):
        statistics.get_user_statistics.side_effect = RuntimeError("connection refused")

        response = await client.get("/api/export-data")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Failed to export user data",
            "error": "connection refused",
        }

    async def test_resolution_failure_returns_500(self, client, users, statistics):
        users.get_current_user.side_effect = ValueError("users table unavailable")

        response = await client.get("/api/export-data")

        assert response.status_code == 500
        assert response.json()["error"] == "users table unavailable"
        statistics.get_user_statistics.assert_not_called()


class TestExportEndToEnd:
    """Export endpoint against the in-memory database."""

    async def test_missing_token_returns_401(self, client):
        response = await client.get("/api/export-data")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required"}

    async def test_invalid_token_returns_401(self, client):
        response = await client.get("/api/export-data", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    async def test_new_user_export(self, client, auth_headers):
        response = await client.get("/api/export-data", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"] == {"id": "u1", "email": "a@b.com", "full_name": "Ann"}
        assert sorted(p["career_path"] for p in data["progress"]) == ["doctor", "engineer", "pilot"]
        assert all(p["completed_modules"] == [] for p in data["progress"])
        assert data["quizzes"] == []
        assert data["achievements"] == []
        assert data["summary"] == {
            "totalModulesCompleted": 0,
            "totalQuizzesTaken": 0,
            "totalQuizzesPassed": 0,
            "averageScore": 0,
            "totalAchievements": 0,
        }

    async def test_summary_reflects_current_state(self, client, auth_headers, db):
        # Resolve the user once so the record exists
        await client.get("/api/export-data", headers=auth_headers)

        service = ProgressService(db)
        await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=1, career_path="engineer", score=8, total_questions=10, passed=True)
        )
        await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=2, career_path="engineer", score=3, total_questions=10, passed=False)
        )

        response = await client.get("/api/export-data", headers=auth_headers)

        data = response.json()["data"]
        assert data["summary"] == {
            "totalModulesCompleted": 1,
            "totalQuizzesTaken": 2,
            "totalQuizzesPassed": 1,
            "averageScore": 55,
            "totalAchievements": 1,
        }
        assert len(data["quizzes"]) == 2
        assert data["achievements"][0]["achievements"]["id"] == "first_module"
