"""Admin service for reporting."""

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.admin import (
    ActivityItem,
    AdminUser,
    DayActivity,
    DayCount,
    PlatformStats,
    UserPage,
)
from fitness_tracker.services.aggregates import (
    calculate_calories_burned,
    calculate_total_calories,
    count_rows,
    number,
    round_half_up,
    rows_of,
)
from fitness_tracker.services.dates import format_date_string, parse_timestamp
from fitness_tracker.services.stats import StatsRepository

Row = dict[str, object]

REPORT_DAYS = 7
SIGNUP_DAYS = 30
RECENT_USERS_LIMIT = 5
RECENT_MEALS_LIMIT = 10
FEED_WORKOUTS_LIMIT = 10
FEED_MEALS_LIMIT = 10
FEED_MEASUREMENTS_LIMIT = 5
FEED_LIMIT = 20


class AdminRepository(Protocol):
    """Persistence interface for admin data.

    `since` values are ISO timestamps compared against `created_at`.
    """

    def list_users(
        self, offset: int, limit: int, search: str | None = None
    ) -> UserPage:
        """Return a page of users, newest first, optionally filtered."""

    def list_recent_users(self, limit: int) -> list[AdminUser]:
        """Return the newest users."""

    def count_users(self) -> int:
        """Return the total number of users."""

    def list_signup_times(self, since: str) -> list[str]:
        """Return `created_at` of users who signed up since `since`."""

    def count_workouts(
        self, user_id: UUID | None = None, since: str | None = None
    ) -> int:
        """Count non-template workouts, optionally per user or since a time."""

    def count_meals(self, user_id: UUID | None = None, since: str | None = None) -> int:
        """Count meals, optionally per user or since a time."""

    def count_measurements(self, user_id: UUID) -> int:
        """Count a user's body measurements."""

    def list_workout_activity(self, since: str) -> list[Row]:
        """Return `user_id`/`created_at` of workouts logged since `since`."""

    def list_meal_activity(self, since: str) -> list[Row]:
        """Return `user_id`/`created_at` of meals logged since `since`."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Row]:
        """Return a user's most recent meals."""

    def list_recent_workouts(self, user_id: UUID, limit: int) -> list[Row]:
        """Return a user's most recent non-template workouts."""

    def list_recent_measurements(self, user_id: UUID, limit: int) -> list[Row]:
        """Return a user's most recent body measurements."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AdminService:
    """Service for admin dashboards."""

    admin_repository: AdminRepository
    stats_repository: StatsRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_platform_stats(self) -> PlatformStats:
        """Return platform totals with signup and activity day buckets."""
        now = self.clock()
        week_ago = now - timedelta(days=REPORT_DAYS)
        signups = self.admin_repository.list_signup_times(
            (now - timedelta(days=SIGNUP_DAYS)).isoformat()
        )
        workouts = self.admin_repository.list_workout_activity(week_ago.isoformat())
        meals = self.admin_repository.list_meal_activity(week_ago.isoformat())

        today = format_date_string(now)
        active_users = {
            row.get("user_id")
            for row in [*rows_of(workouts), *rows_of(meals)]
            if _day_of(row.get("created_at")) == today
        }
        new_users = 0
        for value in signups:
            signed_up = parse_timestamp(value)
            if signed_up is not None and signed_up >= week_ago:
                new_users += 1

        signups_by_day = bucket_by_day(signups, recent_days(now, SIGNUP_DAYS))
        activity_days = recent_days(now, REPORT_DAYS)
        workouts_by_day = bucket_by_day(
            (row.get("created_at") for row in rows_of(workouts)), activity_days
        )
        meals_by_day = bucket_by_day(
            (row.get("created_at") for row in rows_of(meals)), activity_days
        )
        return PlatformStats(
            total_users=self.admin_repository.count_users(),
            new_users_this_week=new_users,
            active_users_today=len(active_users),
            total_workouts=self.admin_repository.count_workouts(),
            total_meals=self.admin_repository.count_meals(),
            workouts_this_week=count_rows(workouts),
            meals_this_week=count_rows(meals),
            signups_by_day=[
                DayCount(date=day, count=count)
                for day, count in signups_by_day.items()
            ],
            activity_by_day=[
                DayActivity(
                    date=day, workouts=workouts_by_day[day], meals=meals_by_day[day]
                )
                for day in activity_days
            ],
            recent_users=self.admin_repository.list_recent_users(RECENT_USERS_LIMIT),
        )

    def list_users(
        self, page: int = 1, limit: int = 20, search: str | None = None
    ) -> dict[str, object]:
        """Return a page of users with all-time and 7-day activity numbers."""
        result = self.admin_repository.list_users((page - 1) * limit, limit, search)
        start = self._report_start()
        summaries = []
        for user in result.users:
            meals = self.stats_repository.list_meals(user.id, start)
            workouts = self.stats_repository.list_workouts(user.id, start)
            summaries.append(
                {
                    "id": str(user.id),
                    "clerk_user_id": user.clerk_user_id,
                    "email": user.email,
                    "first_name": user.first_name,
                    "last_name": user.last_name,
                    "created_at": user.created_at.isoformat()
                    if user.created_at
                    else None,
                    "workout_count": self.admin_repository.count_workouts(user.id),
                    "meal_count": self.admin_repository.count_meals(user.id),
                    "meals_last_7d": count_rows(meals),
                    "workouts_last_7d": count_rows(workouts),
                    "avg_calories_7d": round_half_up(
                        calculate_total_calories(meals) / REPORT_DAYS, 1
                    ),
                }
            )
        return {
            "users": summaries,
            "total": result.total,
            "page": page,
            "totalPages": math.ceil(result.total / limit),
        }

    def get_user_detail(self, user_id: UUID) -> dict[str, object]:
        """Return profile, recent meals, 7-day totals and all-time counts."""
        start = self._report_start()
        meals = self.stats_repository.list_meals(user_id, start)
        workouts = self.stats_repository.list_workouts(user_id, start)
        return {
            "user_id": str(user_id),
            "profile": self.stats_repository.get_profile(user_id),
            "recent_meals": self.admin_repository.list_recent_meals(
                user_id, limit=RECENT_MEALS_LIMIT
            ),
            "calories_last_7d": calculate_total_calories(meals),
            "burned_last_7d": calculate_calories_burned(workouts),
            "stats": {
                "workouts": self.admin_repository.count_workouts(user_id),
                "meals": self.admin_repository.count_meals(user_id),
                "measurements": self.admin_repository.count_measurements(user_id),
            },
        }

    def get_user_activity(self, user_id: UUID) -> list[ActivityItem]:
        """Return the user's latest workouts, meals and weigh-ins, newest first."""
        repository = self.admin_repository
        activities = [
            ActivityItem(
                type="workout",
                description=f"Logged workout: {row.get('name') or 'Untitled'}",
                created_at=row.get("created_at"),
            )
            for row in rows_of(
                repository.list_recent_workouts(user_id, FEED_WORKOUTS_LIMIT)
            )
        ]
        for row in rows_of(repository.list_recent_meals(user_id, FEED_MEALS_LIMIT)):
            meal_type = row.get("meal_type") or "meal"
            food_name = row.get("food_name") or "Untitled"
            activities.append(
                ActivityItem(
                    type="meal",
                    description=f"Logged {meal_type}: {food_name}",
                    created_at=row.get("created_at"),
                )
            )
        for row in rows_of(
            repository.list_recent_measurements(user_id, FEED_MEASUREMENTS_LIMIT)
        ):
            activities.append(
                ActivityItem(
                    type="measurement",
                    description=f"Logged weight: {number(row.get('weight')):g} lb",
                    created_at=row.get("created_at"),
                )
            )
        activities.sort(key=_activity_time, reverse=True)
        return activities[:FEED_LIMIT]

    def _report_start(self) -> str:
        return (self.clock() - timedelta(days=REPORT_DAYS)).isoformat()


def recent_days(now: datetime, days: int) -> list[str]:
    """Return the last `days` day strings ending with `now`'s day, oldest first."""
    return [
        format_date_string(now - timedelta(days=offset))
        for offset in range(days - 1, -1, -1)
    ]


def bucket_by_day(timestamps: Iterable[object], days: list[str]) -> dict[str, int]:
    """Count timestamps per UTC day, ignoring days outside `days`."""
    counts = dict.fromkeys(days, 0)
    for value in timestamps:
        day = _day_of(value)
        if day in counts:
            counts[day] += 1
    return counts


def _day_of(value: object) -> str | None:
    stamp = parse_timestamp(value)
    return format_date_string(stamp) if stamp else None


def _activity_time(item: ActivityItem) -> datetime:
    return parse_timestamp(item.created_at) or datetime.min.replace(tzinfo=UTC)
