"""Tests for the Web API endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from lingo import __version__
from lingo.db.database import get_db
from lingo.db.seed import insert_subscription
from lingo.web.api import create_app

USER_1 = {"X-User-Id": "user_1"}


@pytest.fixture
def client(catalog):
    """Test client over the seeded catalog."""
    return TestClient(create_app())


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__
        assert "T" in data["timestamp"]

    def test_openapi_reports_package_version(self, client):
        info = client.get("/openapi.json").json()["info"]
        assert info["version"] == __version__


class TestCourses:
    """Tests for /api/courses."""

    def test_list_courses(self, client):
        response = client.get("/api/courses")
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [c["title"] for c in data["courses"]] == ["Spanish", "French"]

    def test_get_course(self, client, catalog):
        response = client.get(f"/api/courses/{catalog['Spanish']}")
        assert response.status_code == 200
        units = response.json()["units"]
        assert [u["title"] for u in units] == ["Unit 1", "Unit 2"]
        assert [l["title"] for l in units[0]["lessons"]] == ["L1", "L2", "Empty"]

    def test_get_course_not_found(self, client):
        response = client.get("/api/courses/9999")
        assert response.status_code == 404


class TestLearn:
    """Tests for /api/learn."""

    def test_progress_anonymous_is_null(self, client):
        response = client.get("/api/learn/progress")
        assert response.status_code == 200
        assert response.json() is None

    def test_progress(self, client):
        data = client.get("/api/learn/progress", headers=USER_1).json()
        assert data["user_name"] == "Ana"
        assert data["active_course"]["title"] == "Spanish"

    def test_units_with_completion(self, client, mark):
        mark("user_1", "q1a", "q1b")

        data = client.get("/api/learn/units", headers=USER_1).json()

        lessons = {l["title"]: l["completed"] for u in data for l in u["lessons"]}
        assert lessons == {"L1": True, "L2": False, "Empty": False, "L3": False}

    def test_units_anonymous_is_empty(self, client):
        assert client.get("/api/learn/units").json() == []

    def test_course_progress(self, client, catalog, mark):
        mark("user_1", "q1a", "q1b")

        data = client.get("/api/learn/course-progress", headers=USER_1).json()

        assert data["active_lesson_id"] == catalog["L2"]
        assert data["active_lesson"]["unit"]["title"] == "Unit 1"

    def test_percentage(self, client, mark):
        mark("user_1", "q1a")
        data = client.get("/api/learn/percentage", headers=USER_1).json()
        assert data == {"percentage": 50}


class TestLessons:
    """Tests for /api/lessons."""

    def test_active_lesson(self, client, catalog):
        data = client.get("/api/lessons/active", headers=USER_1).json()
        assert data["id"] == catalog["L1"]
        assert [c["question"] for c in data["challenges"]] == ["q1a", "q1b"]
        assert len(data["challenges"][1]["challenge_options"]) == 2

    def test_active_lesson_anonymous(self, client):
        response = client.get("/api/lessons/active")
        assert response.status_code == 200
        assert response.json() is None

    def test_lesson_detail(self, client, catalog, mark):
        mark("user_1", "q2a")
        data = client.get(f"/api/lessons/{catalog['L2']}", headers=USER_1).json()
        assert data["completed"] is True
        assert data["challenges"][0]["completed"] is True

    def test_lesson_not_found(self, client):
        response = client.get("/api/lessons/9999", headers=USER_1)
        assert response.status_code == 404

    def test_lesson_zero_is_not_the_active_lesson(self, client):
        """Id 0 is a missing lesson, not a request for the active one."""
        response = client.get("/api/lessons/0", headers=USER_1)
        assert response.status_code == 404

    def test_negative_lesson_id_not_found(self, client):
        response = client.get("/api/lessons/-1", headers=USER_1)
        assert response.status_code == 404


class TestSubscription:
    """Tests for /api/subscription."""

    def test_not_subscribed(self, client):
        response = client.get("/api/subscription", headers=USER_1)
        assert response.status_code == 200
        assert response.json() is None

    def test_active_subscription(self, client):
        with get_db() as conn:
            insert_subscription(
                conn,
                "user_1",
                "cus_1",
                "sub_1",
                "price_1",
                datetime.now(timezone.utc) + timedelta(days=3),
            )

        data = client.get("/api/subscription", headers=USER_1).json()

        assert data["is_active"] is True
        assert data["stripe_price_id"] == "price_1"


class TestLeaderboardAndAdmin:
    """Tests for /api/leaderboard and /api/admin/me."""

    def test_leaderboard(self, client):
        data = client.get("/api/leaderboard", headers=USER_1).json()
        assert data["count"] == 2
        assert [u["user_id"] for u in data["users"]] == ["user_2", "user_1"]

    def test_leaderboard_anonymous(self, client):
        data = client.get("/api/leaderboard").json()
        assert data == {"users": [], "count": 0}

    def test_admin(self, client):
        assert client.get("/api/admin/me", headers={"X-User-Id": "admin_1"}).json() == {
            "is_admin": True
        }
        assert client.get("/api/admin/me", headers=USER_1).json() == {"is_admin": False}
