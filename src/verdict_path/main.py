"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from verdict_path.coins.router import router as coins_router
from verdict_path.config import get_settings
from verdict_path.database import close_db, init_db
from verdict_path.health.router import router as health_router
from verdict_path.litigation.reward_table import RewardTable, build_reward_table
from verdict_path.litigation.router import router as litigation_router
from verdict_path.middleware import setup_middleware
from verdict_path.redis_client import close_redis, init_redis


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app(reward_table: RewardTable | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The reward table is built once here and shared by every request.
    """
    settings = get_settings()

    app = FastAPI(
        title="Verdict Path Rewards API",
        description="Coin rewards and litigation progress for Verdict Path",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.reward_table = reward_table if reward_table is not None else build_reward_table()

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(litigation_router)
    app.include_router(coins_router)

    return app


app = create_app()
