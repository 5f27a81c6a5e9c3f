"""Coin award events published to Redis."""

import json
import logging
from unittest.mock import AsyncMock

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from verdict_path.coins.balance_service import COINS_CHANNEL, publish_coin_event


@pytest.mark.asyncio
async def test_publishes_award_payload() -> None:
    redis = AsyncMock(spec=Redis)
    redis.publish = AsyncMock(spec=Redis.publish)
    await publish_coin_event(redis, 7, 35, "substage", 135)
    redis.publish.assert_awaited_once()
    channel, payload = redis.publish.await_args.args
    assert channel == COINS_CHANNEL
    assert json.loads(payload) == {"user_id": 7, "amount": 35, "reason": "substage", "total_coins": 135}


@pytest.mark.asyncio
async def test_skips_without_client_or_award() -> None:
    redis = AsyncMock(spec=Redis)
    redis.publish = AsyncMock(spec=Redis.publish)
    await publish_coin_event(None, 7, 35, "substage", 135)
    await publish_coin_event(redis, 7, 0, "substage", 100)
    redis.publish.assert_not_awaited()


@pytest.mark.asyncio
async def test_publish_failure_is_logged_not_raised(caplog) -> None:
    redis = AsyncMock(spec=Redis)
    redis.publish = AsyncMock(spec=Redis.publish)
    redis.publish.side_effect = RedisConnectionError("redis down")
    with caplog.at_level(logging.WARNING):
        await publish_coin_event(redis, 7, 5, "daily_claim", 5)
    assert "Failed to publish coin award for user 7" in caplog.text
