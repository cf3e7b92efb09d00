"""Pure reducers over meal, workout, water and mood rows.

Rows are plain mappings using the database column names. Every function here
is total: missing rows, missing fields and non-numeric values count as zero,
and inputs are never mutated.
"""

import math
from collections.abc import Mapping, Sequence

from fitness_tracker.domain.stats import DailyStats, MacroTotals

DEFAULT_CALORIE_GOAL = 2000
PROTEIN_KCAL_PER_GRAM = 4
CARBS_KCAL_PER_GRAM = 4
FAT_KCAL_PER_GRAM = 9

Rows = Sequence[Mapping[str, object]] | None


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity, like JavaScript's Math.round."""
    if digits == 0:
        return math.floor(value + 0.5)
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def number(value: object) -> float:
    """Coerce a column value to a number, treating anything unusable as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int | float):
        return 0 if math.isnan(value) else value
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return 0
        return 0 if math.isnan(parsed) else parsed
    return 0


def rows_of(entries: object) -> list[Mapping[str, object]]:
    """Return the mapping rows of `entries`, or an empty list."""
    if not isinstance(entries, Sequence) or isinstance(entries, str | bytes):
        return []
    return [row for row in entries if isinstance(row, Mapping)]


def count_rows(entries: object) -> int:
    """Return how many entries were logged."""
    if not isinstance(entries, Sequence) or isinstance(entries, str | bytes):
        return 0
    return len(entries)


def sum_field(entries: object, field: str) -> float:
    """Sum one numeric field across rows."""
    return sum((number(row.get(field)) for row in rows_of(entries)), 0)


def calculate_total_calories(meals: Rows) -> float:
    """Return total calories across meals."""
    return sum_field(meals, "calories")


def calculate_total_macros(meals: Rows) -> MacroTotals:
    """Return summed protein, carbs and fat in grams."""
    return MacroTotals(
        protein=sum_field(meals, "protein"),
        carbs=sum_field(meals, "carbs"),
        fat=sum_field(meals, "fat"),
    )


def calculate_calories_burned(workouts: Rows) -> float:
    """Return total estimated calories burned."""
    return sum_field(workouts, "estimated_calories_burned")


def calculate_total_workout_minutes(workouts: Rows) -> float:
    """Return total workout duration in minutes."""
    return sum_field(workouts, "duration_minutes")


def calculate_net_calories(consumed: float, burned: float) -> float:
    """Return consumed minus burned."""
    return consumed - burned


def calculate_calories_remaining(goal: float, consumed: float, burned: float) -> float:
    """Return calories left against the goal after exercise."""
    return goal - (consumed - burned)


def calculate_total_water(entries: Rows) -> float:
    """Return total water intake in ounces."""
    return sum_field(entries, "amount_oz")


def calculate_average_mood(checkins: Rows) -> float | None:
    """Return the mean mood rating, or None when there are no check-ins."""
    return _average_rating(checkins, "mood_rating")


def calculate_average_energy(checkins: Rows) -> float | None:
    """Return the mean energy rating, or None when there are no check-ins."""
    return _average_rating(checkins, "energy_rating")


def calorie_goal(profile: Mapping[str, object] | None) -> float:
    """Return the profile's calorie target, or the default goal."""
    targets = profile.get("macro_targets") if isinstance(profile, Mapping) else None
    if isinstance(targets, Mapping):
        goal = number(targets.get("calories"))
        if goal:
            return goal
    return DEFAULT_CALORIE_GOAL


def generate_daily_stats(  # noqa: PLR0913
    *,
    meals: Rows = None,
    workouts: Rows = None,
    water: Rows = None,
    profile: Mapping[str, object] | None = None,
    date: str | None = None,
) -> DailyStats:
    """Combine the day's meals, workouts and water into one summary."""
    consumed = calculate_total_calories(meals)
    burned = calculate_calories_burned(workouts)
    goal = calorie_goal(profile)
    macros = calculate_total_macros(meals)
    return DailyStats(
        date=date,
        consumed=consumed,
        burned=burned,
        net=calculate_net_calories(consumed, burned),
        goal=goal,
        remaining=calculate_calories_remaining(goal, consumed, burned),
        protein=round_half_up(macros.protein),
        carbs=round_half_up(macros.carbs),
        fat=round_half_up(macros.fat),
        meals_logged=count_rows(meals),
        workouts_logged=count_rows(workouts),
        water_oz=calculate_total_water(water),
    )


def calculate_macro_percentages(macros: MacroTotals) -> MacroTotals:
    """Return the share of calories from each macro, in whole percent.

    Each share is rounded on its own, so the three need not add up to 100.
    """
    protein_kcal = number(macros.protein) * PROTEIN_KCAL_PER_GRAM
    carbs_kcal = number(macros.carbs) * CARBS_KCAL_PER_GRAM
    fat_kcal = number(macros.fat) * FAT_KCAL_PER_GRAM
    total_kcal = protein_kcal + carbs_kcal + fat_kcal
    if total_kcal == 0:
        return MacroTotals(protein=0, carbs=0, fat=0)
    return MacroTotals(
        protein=round_half_up(protein_kcal / total_kcal * 100),
        carbs=round_half_up(carbs_kcal / total_kcal * 100),
        fat=round_half_up(fat_kcal / total_kcal * 100),
    )


def _average_rating(checkins: Rows, field: str) -> float | None:
    count = count_rows(checkins)
    if count == 0:
        return None
    return round_half_up(sum_field(checkins, field) / count, 1)
