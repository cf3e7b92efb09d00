"""Supabase admin data access."""

import re
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.adapters.supabase_stats_repository import NOT_TEMPLATE_FILTER
from fitness_tracker.domain.admin import AdminUser, UserPage
from fitness_tracker.services.admin import AdminRepository

_USER_COLUMNS = "id, clerk_user_id, email, first_name, last_name, created_at"
# Characters with meaning inside a PostgREST or=(...) filter.
_FILTER_SYNTAX = re.compile(r"[,()]")


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def list_users(
        self, offset: int, limit: int, search: str | None = None
    ) -> UserPage:
        """Return a page of users, newest first, matching `search` if given."""
        query = self.client.table("users").select(_USER_COLUMNS, count="exact")
        term = _FILTER_SYNTAX.sub(" ", search or "").strip()
        if term:
            query = query.or_(
                f"email.ilike.%{term}%,first_name.ilike.%{term}%,"
                f"last_name.ilike.%{term}%"
            )
        response = (
            query.order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return UserPage(
            users=[_parse_user(row) for row in response.data or []],
            total=response.count or 0,
        )

    def list_recent_users(self, limit: int) -> list[AdminUser]:
        """Return the newest users."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_user(row) for row in response.data or []]

    def count_users(self) -> int:
        """Return the total number of users."""
        response = (
            self.client.table("users").select("id", count="exact", head=True).execute()
        )
        return response.count or 0

    def list_signup_times(self, since: str) -> list[str]:
        """Return signup timestamps since `since`, oldest first."""
        response = (
            self.client.table("users")
            .select("created_at")
            .gte("created_at", since)
            .order("created_at", desc=False)
            .execute()
        )
        return [
            row["created_at"]
            for row in response.data or []
            if isinstance(row.get("created_at"), str)
        ]

    def count_workouts(
        self, user_id: UUID | None = None, since: str | None = None
    ) -> int:
        """Count non-template workouts."""
        query = (
            self.client.table("workouts")
            .select("id", count="exact", head=True)
            .or_(NOT_TEMPLATE_FILTER)
        )
        return _count(query, user_id, since)

    def count_meals(self, user_id: UUID | None = None, since: str | None = None) -> int:
        """Count logged meals."""
        query = self.client.table("meals").select("id", count="exact", head=True)
        return _count(query, user_id, since)

    def count_measurements(self, user_id: UUID) -> int:
        """Count a user's body measurements."""
        query = self.client.table("body_measurements").select(
            "id", count="exact", head=True
        )
        return _count(query, user_id, None)

    def list_workout_activity(self, since: str) -> list[dict[str, object]]:
        """Return who logged workouts since `since`, and when."""
        response = (
            self.client.table("workouts")
            .select("user_id, created_at")
            .gte("created_at", since)
            .or_(NOT_TEMPLATE_FILTER)
            .execute()
        )
        return response.data or []

    def list_meal_activity(self, since: str) -> list[dict[str, object]]:
        """Return who logged meals since `since`, and when."""
        response = (
            self.client.table("meals")
            .select("user_id, created_at")
            .gte("created_at", since)
            .execute()
        )
        return response.data or []

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[dict[str, object]]:
        """Return a user's most recent meals."""
        response = (
            self.client.table("meals")
            .select(
                "id, food_name, meal_type, meal_date, calories, protein, carbs, fat, "
                "created_at"
            )
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    def list_recent_workouts(
        self, user_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        """Return a user's most recent non-template workouts."""
        response = (
            self.client.table("workouts")
            .select("id, name, created_at")
            .eq("user_id", str(user_id))
            .or_(NOT_TEMPLATE_FILTER)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    def list_recent_measurements(
        self, user_id: UUID, limit: int
    ) -> list[dict[str, object]]:
        """Return a user's most recent body measurements."""
        response = (
            self.client.table("body_measurements")
            .select("id, weight, created_at")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []


def _count(query, user_id: UUID | None, since: str | None) -> int:
    if user_id is not None:
        query = query.eq("user_id", str(user_id))
    if since is not None:
        query = query.gte("created_at", since)
    return query.execute().count or 0


def _parse_user(row: dict[str, object]) -> AdminUser:
    created = row.get("created_at")
    return AdminUser(
        id=UUID(str(row["id"])),
        clerk_user_id=str(row["clerk_user_id"]),
        email=row.get("email"),
        created_at=datetime.fromisoformat(created)
        if isinstance(created, str) and created
        else None,
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
    )
