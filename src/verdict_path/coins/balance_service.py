"""Coin balance mutation, balance reads and coin-to-credit conversion.

``add_coins`` and ``spend_coins`` are the only code paths that change a
user's stored balance. Neither commits: callers run them inside their own
``atomic`` block so the award and the event that earned it land together.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from redis.asyncio import Redis
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.config import get_settings
from verdict_path.database import atomic, read_only
from verdict_path.db.models import CoinConversion, CoinLedger, User
from verdict_path.errors import ConversionCapExceeded, InsufficientCoins, UserNotFound
from verdict_path.metrics import COINS_AWARDED
from verdict_path.users.service import require_user

logger = logging.getLogger(__name__)

COINS_CHANNEL = "pubsub:coins"


@dataclass(frozen=True)
class Balance:
    total_coins: int
    coins_spent: int
    available_coins: int
    lifetime_credits: int
    max_lifetime_credits: int
    remaining_lifetime_credits: int


@dataclass(frozen=True)
class ConversionResult:
    coins_converted: int
    credit_amount: int
    balance: Balance


def _check_amount(amount: object) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        msg = f"Coin amount must be a non-negative integer, got {amount!r}"
        raise ValueError(msg)
    return amount


async def add_coins(
    db: AsyncSession,
    user_id: int,
    amount: int,
    reason: str,
    source_id: str | None = None,
) -> int:
    """Credit ``amount`` coins to the user. Returns the new total balance.

    ``amount`` comes from server-side reward logic only.
    """
    amount = _check_amount(amount)

    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(total_coins=User.total_coins + amount)
        .returning(User.total_coins)
    )
    new_total = result.scalar_one_or_none()
    if new_total is None:
        raise UserNotFound(user_id)

    db.add(CoinLedger(
        user_id=user_id,
        amount=amount,
        reason=reason,
        source_id=source_id,
        balance_after=new_total,
        created_at=datetime.now(timezone.utc),
    ))
    await db.flush()

    COINS_AWARDED.labels(reason=reason).inc(amount)
    return new_total


async def spend_coins(
    db: AsyncSession,
    user_id: int,
    amount: int,
    reason: str,
    source_id: str | None = None,
) -> int:
    """Mark ``amount`` coins as spent. Returns the remaining available coins.

    Earned history (``total_coins``) is never rewritten; spending raises
    ``coins_spent`` under a guard that keeps available coins non-negative.
    """
    amount = _check_amount(amount)

    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.total_coins - User.coins_spent >= amount)
        .values(coins_spent=User.coins_spent + amount)
        .returning(User.total_coins, User.coins_spent)
    )
    row = result.one_or_none()
    if row is None:
        exists = await db.execute(select(User.id).where(User.id == user_id))
        if exists.scalar_one_or_none() is None:
            raise UserNotFound(user_id)
        msg = "Insufficient available coins"
        raise InsufficientCoins(msg)

    available = row.total_coins - row.coins_spent
    db.add(CoinLedger(
        user_id=user_id,
        amount=-amount,
        reason=reason,
        source_id=source_id,
        balance_after=available,
        created_at=datetime.now(timezone.utc),
    ))
    await db.flush()
    return available


async def publish_coin_event(redis: Redis | None, user_id: int, amount: int, reason: str, total_coins: int) -> None:
    """Broadcast a committed award for live dashboards. Best effort."""
    if redis is None or amount <= 0:
        return
    try:
        await redis.publish(
            COINS_CHANNEL,
            json.dumps({
                "user_id": user_id,
                "amount": amount,
                "reason": reason,
                "total_coins": total_coins,
            }),
        )
    except Exception:
        logger.warning("Failed to publish coin award for user %d", user_id, exc_info=True)


async def _lifetime_credits(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.coalesce(func.sum(CoinConversion.credit_amount), 0))
        .where(CoinConversion.user_id == user_id)
    )
    return int(result.scalar_one())


async def get_balance(db: AsyncSession, user_id: int) -> Balance:
    """Read the user's coin balance and credit conversion headroom."""
    settings = get_settings()
    async with read_only(db):
        result = await db.execute(
            select(User.total_coins, User.coins_spent).where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            raise UserNotFound(user_id)
        lifetime = await _lifetime_credits(db, user_id)

    return Balance(
        total_coins=row.total_coins,
        coins_spent=row.coins_spent,
        available_coins=row.total_coins - row.coins_spent,
        lifetime_credits=lifetime,
        max_lifetime_credits=settings.max_lifetime_credits,
        remaining_lifetime_credits=max(0, settings.max_lifetime_credits - lifetime),
    )


async def convert_coins(db: AsyncSession, user_id: int, coins: int) -> ConversionResult:
    """Convert available coins into account credit.

    Coins must be a positive multiple of the conversion rate, and the
    lifetime credit cap is enforced across all past conversions.
    """
    settings = get_settings()
    rate = settings.coins_per_credit
    if isinstance(coins, bool) or coins <= 0 or coins % rate != 0:
        msg = f"Coins must be a positive multiple of {rate}"
        raise ValueError(msg)
    credits = coins // rate

    async with atomic(db):
        # Serializes conversions per user on Postgres; the cap check below reads the sum.
        locked = await db.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        )
        if locked.scalar_one_or_none() is None:
            raise UserNotFound(user_id)

        lifetime = await _lifetime_credits(db, user_id)
        remaining = settings.max_lifetime_credits - lifetime
        if credits > remaining:
            msg = (
                f"Conversion would exceed the lifetime cap of {settings.max_lifetime_credits} credits "
                f"({max(0, remaining)} remaining)"
            )
            raise ConversionCapExceeded(msg)

        now = datetime.now(timezone.utc)
        conversion = CoinConversion(
            user_id=user_id,
            coins_converted=coins,
            credit_amount=credits,
            conversion_rate=rate,
            converted_at=now,
        )
        db.add(conversion)
        await db.flush()
        await spend_coins(db, user_id, coins, "conversion", source_id=f"conversion:{conversion.id}")

    logger.info("User %d converted %d coins to %d credits", user_id, coins, credits)
    balance = await get_balance(db, user_id)
    return ConversionResult(coins_converted=coins, credit_amount=credits, balance=balance)


async def list_conversions(db: AsyncSession, user_id: int, limit: int = 50) -> list[CoinConversion]:
    """Most recent conversions first."""
    async with read_only(db):
        await require_user(db, user_id)
        result = await db.execute(
            select(CoinConversion)
            .where(CoinConversion.user_id == user_id)
            .order_by(CoinConversion.converted_at.desc(), CoinConversion.id.desc())
            .limit(limit)
        )
        return list(result.scalars())
