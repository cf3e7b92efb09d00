"""Supabase repository for statistics source rows."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_tracker.services.stats import StatsRepository

NOT_TEMPLATE_FILTER = "is_template.is.null,is_template.eq.false"
_MEAL_COLUMNS = "id, meal_date, meal_type, food_name, calories, protein, carbs, fat"


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_meals(
        self, user_id: UUID, start: str, end: str | None = None
    ) -> list[dict[str, object]]:
        """Return meals in the time range."""
        query = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("meal_date", start)
        )
        if end is not None:
            query = query.lte("meal_date", end)
        response = query.order("meal_date", desc=False).execute()
        return response.data or []

    def list_workouts(
        self, user_id: UUID, start: str, end: str | None = None
    ) -> list[dict[str, object]]:
        """Return logged workouts in the time range, skipping templates."""
        query = (
            self.client.table("workouts")
            .select("id, workout_date, estimated_calories_burned, duration_minutes")
            .eq("user_id", str(user_id))
            .gte("workout_date", start)
            .or_(NOT_TEMPLATE_FILTER)
        )
        if end is not None:
            query = query.lte("workout_date", end)
        response = query.order("workout_date", desc=False).execute()
        return response.data or []

    def list_water_entries(
        self, user_id: UUID, start: str, end: str
    ) -> list[dict[str, object]]:
        """Return water intake entries in the time range."""
        response = (
            self.client.table("water_intake")
            .select("id, amount_oz, logged_at")
            .eq("user_id", str(user_id))
            .gte("logged_at", start)
            .lte("logged_at", end)
            .order("logged_at", desc=True)
            .execute()
        )
        return response.data or []

    def list_mood_checkins(
        self, user_id: UUID, start: str, end: str
    ) -> list[dict[str, object]]:
        """Return mood check-ins in the time range."""
        response = (
            self.client.table("mood_checkins")
            .select("id, mood_rating, energy_rating, created_at")
            .eq("user_id", str(user_id))
            .gte("created_at", start)
            .lte("created_at", end)
            .order("created_at", desc=False)
            .execute()
        )
        return response.data or []

    def list_body_measurements(
        self, user_id: UUID, start: str
    ) -> list[dict[str, object]]:
        """Return weight and body fat measurements since `start`."""
        response = (
            self.client.table("body_measurements")
            .select("measurement_date, weight, body_fat_percentage")
            .eq("user_id", str(user_id))
            .gte("measurement_date", start)
            .order("measurement_date", desc=False)
            .execute()
        )
        return response.data or []

    def list_recent_meal_dates(self, user_id: UUID, limit: int) -> list[str]:
        """Return recent meal timestamps, newest first."""
        response = (
            self.client.table("meals")
            .select("meal_date")
            .eq("user_id", str(user_id))
            .order("meal_date", desc=True)
            .limit(limit)
            .execute()
        )
        return _column(response.data, "meal_date")

    def list_recent_workout_dates(self, user_id: UUID, limit: int) -> list[str]:
        """Return recent workout timestamps, newest first."""
        response = (
            self.client.table("workouts")
            .select("workout_date")
            .eq("user_id", str(user_id))
            .or_(NOT_TEMPLATE_FILTER)
            .order("workout_date", desc=True)
            .limit(limit)
            .execute()
        )
        return _column(response.data, "workout_date")

    def get_profile(self, user_id: UUID) -> dict[str, object] | None:
        """Return the user's profile row."""
        response = (
            self.client.table("user_profiles")
            .select("user_id, macro_targets, daily_water_goal_oz")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]
        return None


def _column(rows: list[dict[str, object]] | None, name: str) -> list[str]:
    values = []
    for row in rows or []:
        value = row.get(name)
        if isinstance(value, str) and value:
            values.append(value)
    return values
