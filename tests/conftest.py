"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from fitness_tracker.adapters.fdc_client import FdcClient
from fitness_tracker.config import Settings
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.admin import AdminUser, UserPage
from fitness_tracker.domain.models import UserRecord
from fitness_tracker.services.admin import AdminRepository, AdminService
from fitness_tracker.services.cache import InMemoryCache
from fitness_tracker.services.nutrition import NutritionService
from fitness_tracker.services.stats import StatsRepository, StatsService
from fitness_tracker.services.users import UserRepository, UserService

FIXED_NOW = datetime(2024, 3, 15, 18, 30, tzinfo=UTC)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    profiles: set[UUID] = field(default_factory=set)

    def get_by_clerk_id(self, clerk_user_id: str) -> UserRecord | None:
        return self.users.get(clerk_user_id)

    def create_user(self, clerk_user_id: str, email: str | None) -> UserRecord:
        user = UserRecord(id=uuid4(), clerk_user_id=clerk_user_id, email=email)
        self.users[clerk_user_id] = user
        return user

    def create_profile(self, user_id: UUID) -> None:
        self.profiles.add(user_id)


def _in_range(value: object, start: str, end: str | None) -> bool:
    # Compares on the first 19 characters so "Z" and "+00:00" suffixes agree.
    if not isinstance(value, str):
        return False
    stamp = value[:19]
    if stamp < start[:19]:
        return False
    return end is None or stamp <= end[:19]


@dataclass
class InMemoryStatsRepository(StatsRepository):
    """In-memory stats repository for tests; rows are shared by all users."""

    meals: list[dict[str, object]] = field(default_factory=list)
    workouts: list[dict[str, object]] = field(default_factory=list)
    water: list[dict[str, object]] = field(default_factory=list)
    moods: list[dict[str, object]] = field(default_factory=list)
    measurements: list[dict[str, object]] = field(default_factory=list)
    profile: dict[str, object] | None = None
    fail: bool = False

    def list_meals(self, user_id: UUID, start, end=None) -> list[dict[str, object]]:
        if self.fail:
            raise RuntimeError("database unavailable")
        return [m for m in self.meals if _in_range(m.get("meal_date"), start, end)]

    def list_workouts(self, user_id: UUID, start, end=None) -> list[dict[str, object]]:
        return [
            w
            for w in self.workouts
            if not w.get("is_template")
            and _in_range(w.get("workout_date"), start, end)
        ]

    def list_water_entries(self, user_id: UUID, start, end) -> list[dict[str, object]]:
        return [e for e in self.water if _in_range(e.get("logged_at"), start, end)]

    def list_mood_checkins(self, user_id: UUID, start, end) -> list[dict[str, object]]:
        return [c for c in self.moods if _in_range(c.get("created_at"), start, end)]

    def list_body_measurements(self, user_id: UUID, start) -> list[dict[str, object]]:
        return [
            m
            for m in self.measurements
            if _in_range(m.get("measurement_date"), start, None)
        ]

    def list_recent_meal_dates(self, user_id: UUID, limit: int) -> list[str]:
        dates = sorted((m["meal_date"] for m in self.meals), reverse=True)
        return dates[:limit]

    def list_recent_workout_dates(self, user_id: UUID, limit: int) -> list[str]:
        dates = sorted(
            (w["workout_date"] for w in self.workouts if not w.get("is_template")),
            reverse=True,
        )
        return dates[:limit]

    def get_profile(self, user_id: UUID) -> dict[str, object] | None:
        return self.profile


def _matching(
    rows: list[dict[str, object]], user_id: UUID | None, since: str | None
) -> list[dict[str, object]]:
    return [
        row
        for row in rows
        if (user_id is None or row.get("user_id") == user_id)
        and (since is None or _in_range(row.get("created_at"), since, None))
    ]


def _newest_first(
    rows: list[dict[str, object]], limit: int
) -> list[dict[str, object]]:
    return sorted(rows, key=lambda row: str(row.get("created_at")), reverse=True)[
        :limit
    ]


@dataclass
class InMemoryAdminRepository(AdminRepository):
    """In-memory admin repository for tests; activity rows carry `user_id`."""

    users: list[AdminUser] = field(default_factory=list)
    workouts: list[dict[str, object]] = field(default_factory=list)
    meals: list[dict[str, object]] = field(default_factory=list)
    measurements: list[dict[str, object]] = field(default_factory=list)

    def list_users(
        self, offset: int, limit: int, search: str | None = None
    ) -> UserPage:
        matches = [
            user
            for user in self.users
            if not search or search.lower() in (user.email or "").lower()
        ]
        return UserPage(users=matches[offset : offset + limit], total=len(matches))

    def list_recent_users(self, limit: int) -> list[AdminUser]:
        return self.users[:limit]

    def count_users(self) -> int:
        return len(self.users)

    def list_signup_times(self, since: str) -> list[str]:
        stamps = [user.created_at.isoformat() for user in self.users if user.created_at]
        return [stamp for stamp in stamps if _in_range(stamp, since, None)]

    def count_workouts(
        self, user_id: UUID | None = None, since: str | None = None
    ) -> int:
        return len(_matching(self.workouts, user_id, since))

    def count_meals(self, user_id: UUID | None = None, since: str | None = None) -> int:
        return len(_matching(self.meals, user_id, since))

    def count_measurements(self, user_id: UUID) -> int:
        return len(_matching(self.measurements, user_id, None))

    def list_workout_activity(self, since: str) -> list[dict[str, object]]:
        return _matching(self.workouts, None, since)

    def list_meal_activity(self, since: str) -> list[dict[str, object]]:
        return _matching(self.meals, None, since)

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[dict[str, object]]:
        return _newest_first(_matching(self.meals, user_id, None), limit)

    def list_recent_workouts(
        self, user_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        return _newest_first(_matching(self.workouts, user_id, None), limit)

    def list_recent_measurements(
        self, user_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        return _newest_first(_matching(self.measurements, user_id, None), limit)


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_calls: int = 0
    food_calls: int = 0
    failures_left: int = 0
    error: Exception = field(default_factory=lambda: RuntimeError("FDC unavailable"))
    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broiler, breast, roasted",
                    "brandOwner": "Kirkland Signature",
                    "foodCategory": "Poultry Products",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 165},
                        {"nutrientId": 1003, "value": 31.02},
                        {"nutrientId": 1004, "value": 3.57},
                        {"nutrientId": 1005, "value": 0},
                        {"nutrientId": 1093, "value": 74},
                    ],
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171077,
            "description": "Chicken, broiler, breast, roasted",
            "foodCategory": {"description": "Poultry Products"},
            "servingSize": 140,
            "servingSizeUnit": "g",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 165},
                {"nutrient": {"id": 1003}, "amount": 31.02},
                {"nutrient": {"id": 1079}, "amount": 0},
                {"nutrient": {"id": 2000}, "amount": 0.04},
            ],
            "foodPortions": [
                {"amount": 1, "modifier": "cup, chopped", "gramWeight": 140},
                {"amount": 1, "measureUnit": {"name": "oz"}, "gramWeight": 28.35},
                {"amount": 0.5, "gramWeight": 86},
            ],
        }
    )

    async def search_foods(self, query: str, page_size: int = 25) -> dict[str, object]:
        self.search_calls += 1
        self._maybe_fail()
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        self._maybe_fail()
        return self.food_payload

    def _maybe_fail(self) -> None:
        if self.failures_left:
            self.failures_left -= 1
            raise self.error


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def stats_repository() -> InMemoryStatsRepository:
    return InMemoryStatsRepository()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def admin_repository() -> InMemoryAdminRepository:
    return InMemoryAdminRepository()


@pytest.fixture
def container(
    settings: Settings,
    stats_repository: InMemoryStatsRepository,
    fdc_client: FakeFdcClient,
    admin_repository: InMemoryAdminRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=UserService(InMemoryUserRepository()),
        stats_service=StatsService(stats_repository, clock=lambda: FIXED_NOW),
        nutrition_service=NutritionService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            retry_delay_seconds=0,
        ),
        admin_service=AdminService(
            admin_repository=admin_repository,
            stats_repository=stats_repository,
            clock=lambda: FIXED_NOW,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-Clerk-User-Id": "user_test", "X-User-Email": "test@example.com"}
