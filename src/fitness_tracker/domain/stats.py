"""Domain models for statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of YYYY-MM-DD date strings."""

    start_date: str
    end_date: str


@dataclass(frozen=True)
class MacroTotals:
    """Protein, carbs and fat, in grams or percent depending on context."""

    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyStats:
    """Calorie and macro summary for one day."""

    date: str
    consumed: float
    burned: float
    net: float
    goal: float
    remaining: float
    protein: int
    carbs: int
    fat: int
    meals_logged: int
    workouts_logged: int
    water_oz: float


@dataclass(frozen=True)
class MacroBreakdown:
    """Macro grams and calorie percentages for one day."""

    date: str
    grams: MacroTotals
    percentages: MacroTotals


@dataclass(frozen=True)
class MealTypeGroup:
    """Meals of one type with their calorie total."""

    meals: list[dict[str, object]]
    total: float


@dataclass(frozen=True)
class DayBreakdown:
    """Meals grouped by type plus totals for one day."""

    date: str
    meals_by_type: dict[str, MealTypeGroup]
    calories: float
    burned: float
    net: float
    protein: float
    carbs: float
    fat: float
    workout_count: int


@dataclass(frozen=True)
class DailyPoint:
    """Per-day data point in a trend series."""

    date: str
    calories_consumed: float
    calories_burned: float
    workouts: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class WeightPoint:
    """Body measurement data point."""

    date: str
    weight: float | None
    body_fat: float | None


@dataclass(frozen=True)
class WeeklySummary:
    """Totals for a seven-day window."""

    week_start: str
    week_end: str
    total_calories: float
    avg_daily_calories: int
    total_burned: float
    workout_count: int
    days_logged: int


@dataclass(frozen=True)
class WeeklyTrends:
    """Daily points, weight history and weekly summaries."""

    daily: list[DailyPoint]
    weight: list[WeightPoint]
    weekly: list[WeeklySummary]


@dataclass(frozen=True)
class Streaks:
    """Workout and meal logging streaks."""

    workout_streak_weeks: int
    workouts_this_week: int
    workouts_goal: int
    workout_on_track: bool
    meal_streak_days: int
    meals_today: int
    meals_goal: int
    meal_logged_today: bool


@dataclass(frozen=True)
class MoodTrends:
    """Average mood and energy over a date range."""

    start_date: str
    end_date: str
    checkins: int
    average_mood: float | None
    average_energy: float | None
