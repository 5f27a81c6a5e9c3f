"""Litigation progress endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.database import get_session
from verdict_path.dependencies import get_redis_dep, get_reward_table
from verdict_path.litigation.completion_service import complete_stage, complete_substage
from verdict_path.litigation.progress_service import get_progress
from verdict_path.litigation.reward_table import RewardTable
from verdict_path.litigation.schemas import (
    CompletionResponse,
    ProgressResponse,
    StageEntry,
    SubstageEntry,
    TaxonomyResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Litigation"])

# Longer ids cannot be canonical; they are rejected before reaching the ledger.
MAX_SUBSTAGE_ID_LENGTH = 128


@router.get("/litigation/stages", response_model=TaxonomyResponse)
async def list_stages(table: RewardTable = Depends(get_reward_table)):
    """Canonical stages and substages with their coin values."""
    return TaxonomyResponse(
        stages=[
            StageEntry(
                id=stage.id,
                name=stage.name,
                coins=table.get_stage_coins(stage.id),
                substages=[
                    SubstageEntry(id=sub.id, name=sub.name, type=sub.type, coins=sub.coins)
                    for sub in stage.substages
                ],
            )
            for stage in table
        ],
        total_substages=table.total_substages,
    )


@router.post(
    "/users/{user_id}/litigation/substages/{substage_id}/complete",
    response_model=CompletionResponse,
)
async def post_substage_completion(
    user_id: int,
    substage_id: str = Path(max_length=MAX_SUBSTAGE_ID_LENGTH),
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_redis_dep),
    table: RewardTable = Depends(get_reward_table),
):
    """Mark a substage complete. Repeats return already_completed with 0 coins."""
    result = await complete_substage(db, redis, table, user_id, substage_id)
    return CompletionResponse(
        already_completed=result.already_completed,
        coins_awarded=result.coins_awarded,
        total_coins=result.total_coins,
    )


@router.post(
    "/users/{user_id}/litigation/stages/{stage_id}/complete",
    response_model=CompletionResponse,
)
async def post_stage_completion(
    user_id: int,
    stage_id: int,
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_redis_dep),
    table: RewardTable = Depends(get_reward_table),
):
    """Mark a whole stage complete and pay its bonus once."""
    result = await complete_stage(db, redis, table, user_id, stage_id)
    return CompletionResponse(
        already_completed=result.already_completed,
        coins_awarded=result.coins_awarded,
        total_coins=result.total_coins,
    )


@router.get("/users/{user_id}/litigation/progress", response_model=ProgressResponse)
async def read_progress(
    user_id: int,
    db: AsyncSession = Depends(get_session),
    table: RewardTable = Depends(get_reward_table),
):
    """Percent complete, litigation coins and current stage."""
    progress = await get_progress(db, table, user_id)
    return ProgressResponse(
        completed_substage_ids=sorted(progress.completed_substage_ids),
        completed_stage_ids=sorted(progress.completed_stage_ids),
        percent_complete=progress.percent_complete,
        coins_from_litigation=progress.coins_from_litigation,
        current_stage_id=progress.current_stage_id,
        current_stage_name=progress.current_stage_name,
        total_substages=progress.total_substages,
    )
