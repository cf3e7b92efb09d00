"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.fdc_client import HttpxFdcClient
from fitness_tracker.adapters.supabase_admin_repository import SupabaseAdminRepository
from fitness_tracker.adapters.supabase_stats_repository import SupabaseStatsRepository
from fitness_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from fitness_tracker.config import Settings
from fitness_tracker.services.admin import AdminService
from fitness_tracker.services.cache import InMemoryCache
from fitness_tracker.services.nutrition import NutritionService
from fitness_tracker.services.stats import StatsService
from fitness_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    stats_service: StatsService
    nutrition_service: NutritionService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    stats_repository = SupabaseStatsRepository(supabase_client)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key or "",
        base_url=resolved_settings.fdc_base_url,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(SupabaseUserRepository(supabase_client)),
        stats_service=StatsService(stats_repository),
        nutrition_service=NutritionService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
            debug=resolved_settings.nutrition_debug,
        ),
        admin_service=AdminService(
            admin_repository=SupabaseAdminRepository(supabase_client),
            stats_repository=stats_repository,
        ),
        close_resources=close_resources,
    )
