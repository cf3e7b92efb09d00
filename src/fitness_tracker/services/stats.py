"""Statistics service for meals, workouts, water and mood."""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.stats import (
    DailyPoint,
    DailyStats,
    DayBreakdown,
    MacroBreakdown,
    MacroTotals,
    MealTypeGroup,
    MoodTrends,
    Streaks,
    WeeklySummary,
    WeeklyTrends,
    WeightPoint,
)
from fitness_tracker.services.aggregates import (
    calculate_average_energy,
    calculate_average_mood,
    calculate_calories_burned,
    calculate_macro_percentages,
    calculate_net_calories,
    calculate_total_calories,
    calculate_total_macros,
    count_rows,
    generate_daily_stats,
    round_half_up,
    rows_of,
)
from fitness_tracker.services.dates import (
    day_of_week,
    format_date_string,
    get_date_range,
    get_end_of_day,
    get_start_of_day,
    get_start_of_week,
    parse_date_or_today,
)

Row = dict[str, object]

DAYS_PER_WEEK = 7
WORKOUT_DAYS_GOAL = 3
MEALS_PER_DAY_GOAL = 1
LAST_ON_TRACK_WEEKDAY = 3
RECENT_WORKOUTS_LIMIT = 200
RECENT_MEALS_LIMIT = 100


class StatsRepository(Protocol):
    """Read interface for the rows the statistics are computed from.

    `start`/`end` are ISO timestamps; `end` of None means open-ended.
    """

    def list_meals(
        self, user_id: UUID, start: str, end: str | None = None
    ) -> list[Row]:
        """Return meals logged in the range, oldest first."""

    def list_workouts(
        self, user_id: UUID, start: str, end: str | None = None
    ) -> list[Row]:
        """Return non-template workouts in the range, oldest first."""

    def list_water_entries(self, user_id: UUID, start: str, end: str) -> list[Row]:
        """Return water intake entries in the range."""

    def list_mood_checkins(self, user_id: UUID, start: str, end: str) -> list[Row]:
        """Return mood check-ins in the range."""

    def list_body_measurements(self, user_id: UUID, start: str) -> list[Row]:
        """Return body measurements since `start`, oldest first."""

    def list_recent_meal_dates(self, user_id: UUID, limit: int) -> list[str]:
        """Return the most recent meal timestamps, newest first."""

    def list_recent_workout_dates(self, user_id: UUID, limit: int) -> list[str]:
        """Return the most recent workout timestamps, newest first."""

    def get_profile(self, user_id: UUID) -> Row | None:
        """Return the user's profile row, if any."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class StatsService:
    """Service that fetches rows and reduces them to summaries."""

    repository: StatsRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_daily(self, user_id: UUID, date_string: str | None = None) -> DailyStats:
        """Return calories, macros and water for a day (default today)."""
        day = parse_date_or_today(date_string, now=self.clock())
        start, end = get_start_of_day(day), get_end_of_day(day)
        return generate_daily_stats(
            meals=self.repository.list_meals(user_id, start, end),
            workouts=self.repository.list_workouts(user_id, start, end),
            water=self.repository.list_water_entries(user_id, start, end),
            profile=self.repository.get_profile(user_id),
            date=day,
        )

    def get_macros(
        self, user_id: UUID, date_string: str | None = None
    ) -> MacroBreakdown:
        """Return macro grams and calorie percentages for a day."""
        day = parse_date_or_today(date_string, now=self.clock())
        meals = self.repository.list_meals(
            user_id, get_start_of_day(day), get_end_of_day(day)
        )
        totals = calculate_total_macros(meals)
        return MacroBreakdown(
            date=day,
            grams=MacroTotals(
                protein=round_half_up(totals.protein, 1),
                carbs=round_half_up(totals.carbs, 1),
                fat=round_half_up(totals.fat, 1),
            ),
            percentages=calculate_macro_percentages(totals),
        )

    def get_day_breakdown(self, user_id: UUID, date_string: str) -> DayBreakdown:
        """Return the day's meals grouped by meal type, with totals."""
        start, end = get_start_of_day(date_string), get_end_of_day(date_string)
        meals = self.repository.list_meals(user_id, start, end)
        workouts = self.repository.list_workouts(user_id, start, end)

        grouped: dict[str, list[Row]] = {}
        for meal in rows_of(meals):
            meal_type = meal.get("meal_type") or "other"
            grouped.setdefault(str(meal_type), []).append(meal)

        calories = calculate_total_calories(meals)
        burned = calculate_calories_burned(workouts)
        macros = calculate_total_macros(meals)
        return DayBreakdown(
            date=date_string,
            meals_by_type={
                meal_type: MealTypeGroup(
                    meals=group, total=calculate_total_calories(group)
                )
                for meal_type, group in grouped.items()
            },
            calories=calories,
            burned=burned,
            net=calculate_net_calories(calories, burned),
            protein=round_half_up(macros.protein, 1),
            carbs=round_half_up(macros.carbs, 1),
            fat=round_half_up(macros.fat, 1),
            workout_count=count_rows(workouts),
        )

    def get_weekly(self, user_id: UUID, weeks: int = 8) -> WeeklyTrends:
        """Return daily points, weights and weekly summaries for recent weeks."""
        today = self.clock().date()
        first_day = today - timedelta(days=weeks * DAYS_PER_WEEK)
        start = get_start_of_day(format_date_string(first_day))
        meals_by_day = _group_by_day(
            self.repository.list_meals(user_id, start), "meal_date"
        )
        workouts_by_day = _group_by_day(
            self.repository.list_workouts(user_id, start), "workout_date"
        )
        measurements = self.repository.list_body_measurements(user_id, start)

        daily = []
        for offset in range((today - first_day).days + 1):
            day = format_date_string(first_day + timedelta(days=offset))
            daily.append(
                _daily_point(
                    day, meals_by_day.get(day, []), workouts_by_day.get(day, [])
                )
            )

        weekly = [
            _summarize_week(daily, today - timedelta(days=index * DAYS_PER_WEEK))
            for index in range(weeks)
        ]
        weekly.reverse()
        return WeeklyTrends(
            daily=daily,
            weight=[
                WeightPoint(
                    date=row["measurement_date"],
                    weight=row.get("weight"),
                    body_fat=row.get("body_fat_percentage"),
                )
                for row in rows_of(measurements)
                if isinstance(row.get("measurement_date"), str)
            ],
            weekly=weekly,
        )

    def get_streaks(self, user_id: UUID) -> Streaks:
        """Return workout week streaks and meal day streaks."""
        workout_dates = self.repository.list_recent_workout_dates(
            user_id, RECENT_WORKOUTS_LIMIT
        )
        meal_dates = self.repository.list_recent_meal_dates(user_id, RECENT_MEALS_LIMIT)
        return calculate_streaks(workout_dates, meal_dates, self.clock().date())

    def get_mood_trends(self, user_id: UUID, days: int = 30) -> MoodTrends:
        """Return average mood and energy over the last `days` days."""
        date_range = get_date_range(days, now=self.clock())
        checkins = self.repository.list_mood_checkins(
            user_id,
            get_start_of_day(date_range.start_date),
            get_end_of_day(date_range.end_date),
        )
        return MoodTrends(
            start_date=date_range.start_date,
            end_date=date_range.end_date,
            checkins=count_rows(checkins),
            average_mood=calculate_average_mood(checkins),
            average_energy=calculate_average_energy(checkins),
        )


def calculate_streaks(
    workout_dates: list[str], meal_dates: list[str], today: date
) -> Streaks:
    """Compute streaks from workout and meal timestamps as of `today`."""
    workout_days = {day for day in map(_parse_day, workout_dates) if day}
    days_by_week: dict[date, set[date]] = {}
    for day in workout_days:
        days_by_week.setdefault(get_start_of_week(day).date(), set()).add(day)

    week_start = get_start_of_week(today).date()
    workouts_this_week = sum(1 for day in workout_days if day >= week_start)

    workout_streak = 0
    check_week = week_start
    while len(days_by_week.get(check_week, ())) >= WORKOUT_DAYS_GOAL:
        workout_streak += 1
        check_week -= timedelta(days=DAYS_PER_WEEK)

    meal_days = [_parse_day(value) for value in meal_dates]
    meal_day_set = set(meal_days)
    meal_streak = 0
    check_day = today
    while check_day in meal_day_set:
        meal_streak += 1
        check_day -= timedelta(days=1)

    weekday = day_of_week(today)
    on_track = workouts_this_week >= WORKOUT_DAYS_GOAL or (
        weekday <= LAST_ON_TRACK_WEEKDAY
        and workouts_this_week
        >= math.ceil((weekday + 1) * WORKOUT_DAYS_GOAL / DAYS_PER_WEEK)
    )
    meals_today = meal_days.count(today)
    return Streaks(
        workout_streak_weeks=workout_streak,
        workouts_this_week=workouts_this_week,
        workouts_goal=WORKOUT_DAYS_GOAL,
        workout_on_track=on_track,
        meal_streak_days=meal_streak,
        meals_today=meals_today,
        meals_goal=MEALS_PER_DAY_GOAL,
        meal_logged_today=meals_today >= MEALS_PER_DAY_GOAL,
    )


def _parse_day(value: object) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _group_by_day(rows: list[Row], column: str) -> dict[str, list[Row]]:
    grouped: dict[str, list[Row]] = {}
    for row in rows_of(rows):
        day = _parse_day(row.get(column))
        if day:
            grouped.setdefault(format_date_string(day), []).append(row)
    return grouped


def _daily_point(day: str, meals: list[Row], workouts: list[Row]) -> DailyPoint:
    macros = calculate_total_macros(meals)
    return DailyPoint(
        date=day,
        calories_consumed=calculate_total_calories(meals),
        calories_burned=calculate_calories_burned(workouts),
        workouts=len(workouts),
        protein=round_half_up(macros.protein, 1),
        carbs=round_half_up(macros.carbs, 1),
        fat=round_half_up(macros.fat, 1),
    )


def _summarize_week(daily: list[DailyPoint], week_end: date) -> WeeklySummary:
    first = format_date_string(week_end - timedelta(days=DAYS_PER_WEEK - 1))
    last = format_date_string(week_end)
    points = [point for point in daily if first <= point.date <= last]
    total_calories = sum((point.calories_consumed for point in points), 0)
    days_logged = sum(1 for point in points if point.calories_consumed > 0)
    return WeeklySummary(
        week_start=first,
        week_end=last,
        total_calories=total_calories,
        avg_daily_calories=(
            round_half_up(total_calories / days_logged) if days_logged else 0
        ),
        total_burned=sum((point.calories_burned for point in points), 0),
        workout_count=sum(point.workouts for point in points),
        days_logged=days_logged,
    )
