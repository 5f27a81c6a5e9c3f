"""Idempotent substage and stage completion with server-computed coin awards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.coins.balance_service import add_coins, publish_coin_event
from verdict_path.database import atomic, upsert_insert
from verdict_path.db.models import StageCompletion, SubstageCompletion, User
from verdict_path.errors import UnknownStage
from verdict_path.litigation.reward_table import RewardTable
from verdict_path.users.service import require_user

logger = logging.getLogger(__name__)

UNKNOWN_STAGE_ID = 0
UNKNOWN_STAGE_NAME = "Unknown"


@dataclass(frozen=True)
class CompletionResult:
    already_completed: bool
    coins_awarded: int
    total_coins: int


async def _current_total(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(User.total_coins).where(User.id == user_id))
    return result.scalar_one()


async def complete_substage(
    db: AsyncSession,
    redis: Redis | None,
    table: RewardTable,
    user_id: int,
    substage_id: str,
) -> CompletionResult:
    """Record a substage completion and award its canonical coins exactly once.

    A repeat (or the losing side of a concurrent race) hits the unique
    (user_id, substage_id) constraint and returns ``already_completed``
    without touching the balance.
    """
    coins = table.get_substage_coins(substage_id)
    info = table.get_substage(substage_id)

    async with atomic(db):
        await require_user(db, user_id)

        stmt = upsert_insert(db, SubstageCompletion).values(
            user_id=user_id,
            stage_id=info.stage_id if info else UNKNOWN_STAGE_ID,
            stage_name=info.stage_name if info else UNKNOWN_STAGE_NAME,
            substage_id=substage_id,
            substage_name=info.name if info else substage_id,
            substage_type=info.type if info else "unknown",
            coins_awarded=coins,
            completed_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "substage_id"])
        inserted = await db.execute(stmt.returning(SubstageCompletion.id))

        if inserted.scalar_one_or_none() is None:
            result = CompletionResult(
                already_completed=True, coins_awarded=0, total_coins=await _current_total(db, user_id)
            )
        elif coins > 0:
            total = await add_coins(db, user_id, coins, "substage", source_id=substage_id)
            result = CompletionResult(already_completed=False, coins_awarded=coins, total_coins=total)
        else:
            result = CompletionResult(
                already_completed=False, coins_awarded=0, total_coins=await _current_total(db, user_id)
            )

    if result.already_completed:
        logger.info("User %d already completed substage %s", user_id, substage_id)
    else:
        logger.info("User %d completed substage %s for %d coins", user_id, substage_id, result.coins_awarded)
        await publish_coin_event(redis, user_id, result.coins_awarded, "substage", result.total_coins)
    return result


async def complete_stage(
    db: AsyncSession,
    redis: Redis | None,
    table: RewardTable,
    user_id: int,
    stage_id: int,
) -> CompletionResult:
    """Award a stage's completion bonus once per user.

    Stage ids outside the taxonomy are rejected. Whether every substage was
    done is computed here, never taken from the caller.
    """
    stage = table.get_stage(stage_id)
    if stage is None:
        raise UnknownStage(stage_id)
    coins = table.get_stage_coins(stage_id)

    async with atomic(db):
        await require_user(db, user_id)

        done = await db.execute(
            select(SubstageCompletion.substage_id).where(
                SubstageCompletion.user_id == user_id,
                SubstageCompletion.stage_id == stage_id,
            )
        )
        completed_ids = set(done.scalars())
        all_done = all(sub.id in completed_ids for sub in stage.substages)

        stmt = upsert_insert(db, StageCompletion).values(
            user_id=user_id,
            stage_id=stage_id,
            stage_name=stage.name,
            coins_awarded=coins,
            all_substages_completed=all_done,
            completed_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "stage_id"])
        inserted = await db.execute(stmt.returning(StageCompletion.id))

        if inserted.scalar_one_or_none() is None:
            result = CompletionResult(
                already_completed=True, coins_awarded=0, total_coins=await _current_total(db, user_id)
            )
        else:
            total = await add_coins(db, user_id, coins, "stage", source_id=f"stage-{stage_id}")
            result = CompletionResult(already_completed=False, coins_awarded=coins, total_coins=total)

    if result.already_completed:
        logger.info("User %d already completed stage %d", user_id, stage_id)
    else:
        logger.info("User %d completed stage %d (%s) for %d coins", user_id, stage_id, stage.name, coins)
        await publish_coin_event(redis, user_id, result.coins_awarded, "stage", result.total_coins)
    return result
