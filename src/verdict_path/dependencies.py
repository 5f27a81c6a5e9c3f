"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from fastapi import Request
from redis.asyncio import Redis

from verdict_path.litigation.reward_table import RewardTable
from verdict_path.redis_client import get_redis_or_none


async def get_redis_dep() -> AsyncGenerator[Redis | None, None]:
    """Yield the Redis client (or None when not initialized) as a FastAPI dependency."""
    yield get_redis_or_none()


def get_reward_table(request: Request) -> RewardTable:
    """The reward table built at application startup."""
    return request.app.state.reward_table
