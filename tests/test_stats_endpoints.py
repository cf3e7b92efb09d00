"""Tests for statistics endpoints."""

from dataclasses import dataclass
from uuid import UUID

from fastapi.testclient import TestClient

from fitness_tracker.api.app import create_app
from fitness_tracker.domain.models import UserRecord
from fitness_tracker.services.users import UserService

MEAL = {
    "meal_date": "2024-03-15T12:00:00+00:00",
    "meal_type": "lunch",
    "calories": 650,
    "protein": 45,
    "carbs": 60,
    "fat": 20,
}


@dataclass
class FailingUserRepository:
    def get_by_clerk_id(self, clerk_user_id: str) -> UserRecord | None:
        raise RuntimeError("database unavailable")

    def create_user(self, clerk_user_id: str, email: str | None) -> UserRecord:
        raise RuntimeError("database unavailable")

    def create_profile(self, user_id: UUID) -> None:
        raise RuntimeError("database unavailable")


def test_stats_require_user_header(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/stats/daily")

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized - No user ID provided"}


def test_user_resolution_failure_is_500(container, auth_headers) -> None:
    container.user_service = UserService(FailingUserRepository())
    client = TestClient(create_app(container))

    response = client.get("/api/stats/daily", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Authentication failed"}


def test_first_request_creates_user(container, auth_headers) -> None:
    client = TestClient(create_app(container))

    client.get("/api/streaks", headers=auth_headers)

    repository = container.user_service.repository
    user = repository.get_by_clerk_id("user_test")
    assert user is not None
    assert user.email == "test@example.com"
    assert user.id in repository.profiles


def test_daily_stats(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    stats_repository.water.append(
        {"logged_at": "2024-03-15T09:00:00+00:00", "amount_oz": 12}
    )
    client = TestClient(create_app(container))

    response = client.get("/api/stats/daily", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "date": "2024-03-15",
        "consumed": 650,
        "burned": 0,
        "net": 650,
        "goal": 2000,
        "remaining": 1350,
        "protein": 45,
        "carbs": 60,
        "fat": 20,
        "mealsLogged": 1,
        "workoutsLogged": 0,
        "waterOz": 12,
    }


def test_daily_stats_for_date(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    client = TestClient(create_app(container))

    response = client.get(
        "/api/stats/daily", params={"date": "2024-03-14"}, headers=auth_headers
    )

    assert response.json()["date"] == "2024-03-14"
    assert response.json()["consumed"] == 0


def test_daily_stats_failure_is_500(container, stats_repository, auth_headers) -> None:
    stats_repository.fail = True
    client = TestClient(create_app(container))

    response = client.get("/api/stats/daily", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to fetch daily stats"}


def test_day_breakdown(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    client = TestClient(create_app(container))

    response = client.get("/api/stats/daily/2024-03-15", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2024-03-15"
    assert data["meals_by_type"]["lunch"]["total"] == 650
    assert len(data["meals_by_type"]["lunch"]["meals"]) == 1
    assert data["totals"]["calories"] == 650
    assert data["totals"]["protein"] == 45
    assert data["workout_count"] == 0


def test_day_breakdown_rejects_bad_date(container, auth_headers) -> None:
    client = TestClient(create_app(container))

    for value in ("2024-13-01", "15-03-2024", "today"):
        response = client.get(f"/api/stats/daily/{value}", headers=auth_headers)
        assert response.status_code == 400


def test_macros(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    client = TestClient(create_app(container))

    response = client.get(
        "/api/stats/macros", params={"date": "2024-03-15"}, headers=auth_headers
    )

    data = response.json()
    assert data["grams"] == {"protein": 45, "carbs": 60, "fat": 20}
    # 180 + 240 + 180 = 600 kcal
    assert data["percentages"] == {"protein": 30, "carbs": 40, "fat": 30}


def test_weekly(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    client = TestClient(create_app(container))

    response = client.get(
        "/api/stats/weekly", params={"weeks": 1}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data["daily"]) == 8
    assert data["daily"][-1]["calories_consumed"] == 650
    assert data["weekly"][0]["week_end"] == "2024-03-15"
    assert data["weight"] == []


def test_weekly_validates_weeks(container, auth_headers) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/api/stats/weekly", params={"weeks": 0}, headers=auth_headers
    )

    assert response.status_code == 422


def test_streaks(container, stats_repository, auth_headers) -> None:
    stats_repository.meals.append(MEAL)
    client = TestClient(create_app(container))

    response = client.get("/api/streaks", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "workout_streak_weeks": 0,
        "workouts_this_week": 0,
        "workouts_goal": 3,
        "workout_on_track": False,
        "meal_streak_days": 1,
        "meals_today": 1,
        "meals_goal": 1,
        "meal_logged_today": True,
    }


def test_mood_trends(container, stats_repository, auth_headers) -> None:
    stats_repository.moods.append(
        {
            "created_at": "2024-03-14T20:00:00+00:00",
            "mood_rating": 4,
            "energy_rating": 2,
        }
    )
    client = TestClient(create_app(container))

    response = client.get(
        "/api/mood-checkins/trends", params={"days": 7}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {
        "start_date": "2024-03-08",
        "end_date": "2024-03-15",
        "checkins": 1,
        "average_mood": 4.0,
        "average_energy": 2.0,
    }


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "timestamp" in response.json()
