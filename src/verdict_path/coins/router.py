"""Coin balance, daily bonus and conversion endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.coins.balance_service import Balance, convert_coins, get_balance, list_conversions
from verdict_path.coins.daily_claim_service import claim_daily
from verdict_path.coins.schemas import (
    BalanceResponse,
    ConversionEntry,
    ConversionHistoryResponse,
    ConvertRequest,
    ConvertResponse,
    DailyClaimResponse,
)
from verdict_path.config import get_settings
from verdict_path.database import get_session
from verdict_path.dependencies import get_redis_dep

router = APIRouter(prefix="/api/v1/users/{user_id}/coins", tags=["Coins"])


def _balance_response(balance: Balance) -> BalanceResponse:
    return BalanceResponse(
        total_coins=balance.total_coins,
        coins_spent=balance.coins_spent,
        available_coins=balance.available_coins,
        lifetime_credits=balance.lifetime_credits,
        max_lifetime_credits=balance.max_lifetime_credits,
        remaining_lifetime_credits=balance.remaining_lifetime_credits,
    )


@router.post("/claim-daily", response_model=DailyClaimResponse)
async def post_daily_claim(
    user_id: int,
    db: AsyncSession = Depends(get_session),
    redis: Redis | None = Depends(get_redis_dep),
):
    """Claim today's login bonus. A second claim on the same day returns claimed=false."""
    settings = get_settings()
    result = await claim_daily(db, redis, user_id, tz=settings.reward_tz)
    return DailyClaimResponse(
        claimed=result.claimed,
        streak=result.streak,
        coins_awarded=result.coins_awarded,
        total_coins=result.total_coins,
    )


@router.get("/balance", response_model=BalanceResponse)
async def read_balance(user_id: int, db: AsyncSession = Depends(get_session)):
    """Total, spent and available coins plus credit headroom."""
    return _balance_response(await get_balance(db, user_id))


@router.post("/convert", response_model=ConvertResponse)
async def post_conversion(
    user_id: int,
    body: ConvertRequest,
    db: AsyncSession = Depends(get_session),
):
    """Convert available coins to account credit."""
    try:
        result = await convert_coins(db, user_id, body.coins)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ConvertResponse(
        coins_converted=result.coins_converted,
        credit_amount=result.credit_amount,
        balance=_balance_response(result.balance),
    )


@router.get("/conversions", response_model=ConversionHistoryResponse)
async def read_conversions(
    user_id: int,
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    """Past coin-to-credit conversions, newest first."""
    rows = await list_conversions(db, user_id, limit=limit)
    return ConversionHistoryResponse(conversions=[ConversionEntry.model_validate(r) for r in rows])
