"""Statistics endpoints for the mobile client."""

import logging
from collections.abc import Callable
from dataclasses import asdict
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from fitness_tracker.api.auth import require_user
from fitness_tracker.domain.models import UserRecord
from fitness_tracker.domain.stats import DailyStats, DayBreakdown, WeeklyTrends
from fitness_tracker.services.dates import is_valid_date_string

router = APIRouter(prefix="/api", tags=["stats"])
_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fetch(what: str, func: Callable[[], T]) -> T:
    try:
        return func()
    except Exception as exc:
        _logger.exception("Error fetching %s", what)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch {what}",
        ) from exc


@router.get("/stats/daily")
async def daily_stats(
    request: Request,
    date: str | None = None,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return the calorie summary for a day (default today)."""
    service = request.app.state.container.stats_service
    stats = _fetch("daily stats", lambda: service.get_daily(user.id, date))
    return serialize_daily_stats(stats)


@router.get("/stats/daily/{date}")
async def daily_breakdown(
    date: str,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return a day's meals grouped by meal type with totals."""
    if not is_valid_date_string(date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date, expected YYYY-MM-DD",
        )
    service = request.app.state.container.stats_service
    breakdown = _fetch(
        "daily stats", lambda: service.get_day_breakdown(user.id, date)
    )
    return _serialize_breakdown(breakdown)


@router.get("/stats/macros")
async def macro_breakdown(
    request: Request,
    date: str | None = None,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return macro grams and calorie percentages for a day."""
    service = request.app.state.container.stats_service
    return asdict(_fetch("macro stats", lambda: service.get_macros(user.id, date)))


@router.get("/stats/weekly")
async def weekly_stats(
    request: Request,
    weeks: int = Query(default=8, ge=1, le=52),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return daily points, weights and weekly summaries."""
    service = request.app.state.container.stats_service
    trends: WeeklyTrends = _fetch(
        "weekly stats", lambda: service.get_weekly(user.id, weeks)
    )
    return asdict(trends)


@router.get("/streaks")
async def streaks(
    request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return workout and meal logging streaks."""
    service = request.app.state.container.stats_service
    return asdict(_fetch("streaks", lambda: service.get_streaks(user.id)))


@router.get("/mood-checkins/trends")
async def mood_trends(
    request: Request,
    days: int = Query(default=30, ge=1, le=365),
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Return average mood and energy over recent days."""
    service = request.app.state.container.stats_service
    return asdict(_fetch("mood trends", lambda: service.get_mood_trends(user.id, days)))


def serialize_daily_stats(stats: DailyStats) -> dict[str, object]:
    """Serialize daily stats with the keys the mobile client reads."""
    return {
        "date": stats.date,
        "consumed": stats.consumed,
        "burned": stats.burned,
        "net": stats.net,
        "goal": stats.goal,
        "remaining": stats.remaining,
        "protein": stats.protein,
        "carbs": stats.carbs,
        "fat": stats.fat,
        "mealsLogged": stats.meals_logged,
        "workoutsLogged": stats.workouts_logged,
        "waterOz": stats.water_oz,
    }


def _serialize_breakdown(breakdown: DayBreakdown) -> dict[str, object]:
    return {
        "date": breakdown.date,
        "meals_by_type": {
            meal_type: asdict(group)
            for meal_type, group in breakdown.meals_by_type.items()
        },
        "totals": {
            "calories": breakdown.calories,
            "burned": breakdown.burned,
            "net": breakdown.net,
            "protein": breakdown.protein,
            "carbs": breakdown.carbs,
            "fat": breakdown.fat,
        },
        "workout_count": breakdown.workout_count,
    }
