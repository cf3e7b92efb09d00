"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI

from fitness_tracker.api.admin import router as admin_router
from fitness_tracker.api.foods import router as foods_router
from fitness_tracker.api.stats import router as stats_router
from fitness_tracker.app_logging import configure_logging
from fitness_tracker.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Fitness Tracker API", lifespan=lifespan)
    app.state.container = container

    app.include_router(stats_router)
    app.include_router(foods_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(tz=UTC).isoformat()}

    return app
