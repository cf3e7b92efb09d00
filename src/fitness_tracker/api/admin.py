"""Admin API endpoints with simple token auth."""

from __future__ import annotations

import secrets
from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer
    from fitness_tracker.domain.admin import AdminUser, PlatformStats

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or not secrets.compare_digest(x_admin_token, admin_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/stats", dependencies=[Depends(require_admin)])
async def platform_stats(request: Request) -> dict[str, object]:
    """Return platform totals and day buckets for the dashboard."""
    container: AppContainer = request.app.state.container
    return serialize_platform_stats(container.admin_service.get_platform_stats())


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    search: str | None = None,
) -> dict[str, object]:
    """Return a page of users with activity counts."""
    container: AppContainer = request.app.state.container
    return container.admin_service.list_users(page=page, limit=limit, search=search)


@router.get("/users/{user_id}", dependencies=[Depends(require_admin)])
async def user_detail(user_id: UUID, request: Request) -> dict[str, object]:
    """Return a detailed user summary."""
    container: AppContainer = request.app.state.container
    return container.admin_service.get_user_detail(user_id)


@router.get("/users/{user_id}/activity", dependencies=[Depends(require_admin)])
async def user_activity(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the user's recent activity feed."""
    container: AppContainer = request.app.state.container
    activities = container.admin_service.get_user_activity(user_id)
    return {"activities": [asdict(item) for item in activities]}


def serialize_platform_stats(stats: PlatformStats) -> dict[str, object]:
    """Serialize platform stats with the keys the admin dashboard reads."""
    return {
        "totalUsers": stats.total_users,
        "newUsersThisWeek": stats.new_users_this_week,
        "activeUsersToday": stats.active_users_today,
        "totalWorkouts": stats.total_workouts,
        "totalMeals": stats.total_meals,
        "workoutsThisWeek": stats.workouts_this_week,
        "mealsThisWeek": stats.meals_this_week,
        "signupsByDay": [asdict(day) for day in stats.signups_by_day],
        "activityByDay": [asdict(day) for day in stats.activity_by_day],
        "recentUsers": [_serialize_user(user) for user in stats.recent_users],
    }


def _serialize_user(user: AdminUser) -> dict[str, object]:
    return {
        "id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }
