"""Admin domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class AdminUser:
    """Minimal admin view of a user."""

    id: UUID
    clerk_user_id: str
    email: str | None
    created_at: datetime | None
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class UserPage:
    """One page of users plus the total number of matches."""

    users: list[AdminUser]
    total: int


@dataclass(frozen=True)
class DayCount:
    date: str
    count: int


@dataclass(frozen=True)
class DayActivity:
    date: str
    workouts: int
    meals: int


@dataclass(frozen=True)
class PlatformStats:
    """Platform-wide totals and recent day buckets for the admin dashboard."""

    total_users: int
    new_users_this_week: int
    active_users_today: int
    total_workouts: int
    total_meals: int
    workouts_this_week: int
    meals_this_week: int
    signups_by_day: list[DayCount]
    activity_by_day: list[DayActivity]
    recent_users: list[AdminUser]


@dataclass(frozen=True)
class ActivityItem:
    """One entry in a user's activity feed."""

    type: str
    description: str
    created_at: str | None
