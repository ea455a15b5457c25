"""Tests for progress tracking, quizzes and achievements."""

from unittest.mock import AsyncMock, patch

import pytest

from physics_lms.core.exceptions import NotFoundError
from physics_lms.gamification.achievement_engine import AchievementEngine, achievement_rules
from physics_lms.schemas.progress import QuizResultCreate
from physics_lms.services.progress_service import ProgressService


class TestProgressService:
    """Tests for ProgressService."""

    async def test_get_progress_creates_default(self, db):
        progress = await ProgressService(db).get_progress("u1", "doctor")

        assert progress.completed_modules == []
        assert progress.current_module == 1

    async def test_unknown_career_path(self, db):
        with pytest.raises(NotFoundError):
            await ProgressService(db).get_progress("u1", "astronaut")

    async def test_complete_module_keeps_modules_unique_and_sorted(self, db):
        service = ProgressService(db)

        await service.complete_module("u1", "engineer", 3)
        await service.complete_module("u1", "engineer", 1)
        result = await service.complete_module("u1", "engineer", 3)

        assert result["progress"].completed_modules == [1, 3]
        assert result["progress"].current_module == 4

    async def test_module_unlock_rules(self, db):
        service = ProgressService(db)

        assert await service.is_module_unlocked("u1", "pilot", 1) is True
        assert await service.is_module_unlocked("u1", "pilot", 2) is False

        await service.complete_module("u1", "pilot", 1)

        assert await service.is_module_unlocked("u1", "pilot", 2) is True
        assert await service.is_module_unlocked("u1", "pilot", 3) is False

    async def test_passing_quiz_completes_module(self, db):
        service = ProgressService(db)

        saved = await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=1, career_path="doctor", score=9, total_questions=10, passed=True)
        )

        progress = await service.get_progress("u1", "doctor")
        assert progress.completed_modules == [1]
        assert saved["result"].id
        assert [a["achievement_id"] for a in saved["earned_achievements"]] == ["first_module"]

    async def test_failing_quiz_does_not_complete_module(self, db):
        service = ProgressService(db)

        saved = await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=1, career_path="doctor", score=2, total_questions=10, passed=False)
        )

        progress = await service.get_progress("u1", "doctor")
        assert progress.completed_modules == []
        assert saved["earned_achievements"] == []

    async def test_failed_quiz_commit_rolls_back_module_completion(self, db):
        service = ProgressService(db)
        passing = QuizResultCreate(module_id=1, career_path="doctor", score=9, total_questions=10, passed=True)

        with patch.object(db, "commit", AsyncMock(side_effect=RuntimeError("insert failed"))):
            with pytest.raises(RuntimeError, match="insert failed"):
                await service.save_quiz_result("u1", passing)

        progress = await service.get_progress("u1", "doctor")
        assert progress.completed_modules == []
        assert progress.current_module == 1
        assert await service.get_user_achievements("u1") == []
        assert await service.get_quiz_results("u1") == []

    async def test_quiz_results_filtered_by_path(self, db):
        service = ProgressService(db)
        await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=1, career_path="doctor", score=2, total_questions=10, passed=False)
        )
        await service.save_quiz_result(
            "u1", QuizResultCreate(module_id=1, career_path="pilot", score=2, total_questions=10, passed=False)
        )

        assert len(await service.get_quiz_results("u1")) == 2
        assert [q.career_path for q in await service.get_quiz_results("u1", "pilot")] == ["pilot"]


class TestAchievementEngine:
    """Tests for achievement awarding."""

    def test_master_rule_is_named_after_path(self):
        master = achievement_rules("pilot")[-1]

        assert master.id == "pilot_master"
        assert master.name == "Pilot Master"
        assert master.min_completed == 6

    async def test_awards_are_idempotent(self, db):
        engine = AchievementEngine(db)

        first = await engine.check_and_award_achievements("u1", "engineer", 5)
        second = await engine.check_and_award_achievements("u1", "engineer", 5)
        await db.commit()

        assert [a["achievement_id"] for a in first] == ["first_module", "five_modules"]
        assert second == []

    async def test_completing_a_path_awards_master(self, db):
        service = ProgressService(db)

        for module_id in range(1, 7):
            result = await service.complete_module("u1", "engineer", module_id)

        assert [a["achievement_id"] for a in result["earned_achievements"]] == ["engineer_master"]
        achievements = await service.get_user_achievements("u1")
        assert {a.achievement.id for a in achievements} == {"first_module", "five_modules", "engineer_master"}


class TestProgressApi:
    """Tests for the progress HTTP endpoints."""

    async def test_requires_authentication(self, client):
        response = await client.get("/api/progress/engineer")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    async def test_get_progress(self, client, auth_headers):
        response = await client.get("/api/progress/engineer", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "u1"
        assert data["completed_modules"] == []
        assert data["current_module"] == 1

    async def test_unknown_path_returns_404(self, client, auth_headers):
        response = await client.get("/api/progress/astronaut", headers=auth_headers)

        assert response.status_code == 404

    async def test_complete_and_unlock(self, client, auth_headers):
        response = await client.post("/api/progress/engineer/modules/1/complete", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["progress"]["completed_modules"] == [1]
        assert body["earned_achievements"][0]["name"] == "First Step"

        response = await client.get("/api/progress/engineer/modules/2/unlocked", headers=auth_headers)
        assert response.json() == {"career_path": "engineer", "module_id": 2, "unlocked": True}

    async def test_submit_and_list_quizzes(self, client, auth_headers):
        response = await client.post(
            "/api/quizzes",
            json={"module_id": 1, "career_path": "pilot", "score": 4, "total_questions": 5, "passed": True},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["result"]["user_id"] == "u1"

        response = await client.get("/api/quizzes", params={"career_path": "pilot"}, headers=auth_headers)
        assert [q["score"] for q in response.json()] == [4]

        response = await client.get("/api/achievements", headers=auth_headers)
        assert [a["achievements"]["id"] for a in response.json()] == ["first_module"]

    async def test_score_above_total_is_rejected(self, client, auth_headers):
        response = await client.post(
            "/api/quizzes",
            json={"module_id": 1, "career_path": "pilot", "score": 6, "total_questions": 5, "passed": True},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_unknown_path_unlock_returns_404(self, client, auth_headers):
        response = await client.get("/api/progress/astronaut/modules/1/unlocked", headers=auth_headers)

        assert response.status_code == 404

    async def test_unknown_path_quiz_filter_returns_404(self, client, auth_headers):
        response = await client.get("/api/quizzes", params={"career_path": "astronaut"}, headers=auth_headers)

        assert response.status_code == 404
