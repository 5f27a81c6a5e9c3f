"""Once-per-calendar-day login bonus with consecutive-day streaks."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo

from redis.asyncio import Redis
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.coins.balance_service import add_coins, publish_coin_event
from verdict_path.database import atomic
from verdict_path.db.models import User
from verdict_path.errors import UserNotFound
from verdict_path.metrics import DAILY_CLAIMS

logger = logging.getLogger(__name__)

# Bonus by streak day; day 7 onward pays the last entry.
DAILY_BONUSES: list[int] = [5, 7, 10, 12, 15, 20, 30]

StreakBonusPolicy = Callable[[int], int]

NEVER_CLAIMED = "never_claimed"
CLAIMED_TODAY = "claimed_today"
CLAIMED_YESTERDAY = "claimed_yesterday"
STREAK_BROKEN = "streak_broken"


@dataclass(frozen=True)
class DailyClaimResult:
    claimed: bool
    streak: int
    coins_awarded: int
    total_coins: int


def daily_bonus_for_streak(streak: int) -> int:
    """Default bonus policy: escalating payout that plateaus at day 7."""
    if streak < 1:
        return 0
    return DAILY_BONUSES[min(streak, len(DAILY_BONUSES)) - 1]


def as_utc(dt: datetime) -> datetime:
    """Treat naive timestamps (SQLite) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def calendar_day(dt: datetime, tz: tzinfo) -> date:
    """Calendar date of ``dt`` in the reference timezone."""
    return as_utc(dt).astimezone(tz).date()


def claim_state(last_claim_at: datetime | None, now: datetime, tz: tzinfo) -> str:
    """Classify a user's claim state by calendar day, not elapsed hours."""
    if last_claim_at is None:
        return NEVER_CLAIMED
    last_day = calendar_day(last_claim_at, tz)
    today = calendar_day(now, tz)
    if last_day >= today:
        return CLAIMED_TODAY
    if last_day == today - timedelta(days=1):
        return CLAIMED_YESTERDAY
    return STREAK_BROKEN


def next_streak(state: str, current_streak: int) -> int:
    if state == CLAIMED_YESTERDAY:
        return current_streak + 1
    return 1


async def claim_daily(
    db: AsyncSession,
    redis: Redis | None,
    user_id: int,
    *,
    tz: tzinfo,
    bonus_policy: StreakBonusPolicy = daily_bonus_for_streak,
    now: datetime | None = None,
) -> DailyClaimResult:
    """Claim today's login bonus.

    The claim-state write is a compare-and-set on the previously read
    ``last_daily_claim_at``; a concurrent request that changed it first
    makes this one observe "already claimed" instead of paying twice.
    """
    now = datetime.now(timezone.utc) if now is None else as_utc(now)

    async with atomic(db):
        result = await db.execute(
            select(User.last_daily_claim_at, User.login_streak, User.total_coins)
            .where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            raise UserNotFound(user_id)

        state = claim_state(row.last_daily_claim_at, now, tz)
        if state == CLAIMED_TODAY:
            outcome = DailyClaimResult(
                claimed=False, streak=row.login_streak, coins_awarded=0, total_coins=row.total_coins
            )
        else:
            streak = next_streak(state, row.login_streak)
            if row.last_daily_claim_at is None:
                unchanged = User.last_daily_claim_at.is_(None)
            else:
                unchanged = User.last_daily_claim_at == row.last_daily_claim_at

            swapped = await db.execute(
                update(User)
                .where(User.id == user_id, unchanged)
                .values(last_daily_claim_at=now, login_streak=streak)
                .returning(User.id)
            )
            if swapped.scalar_one_or_none() is None:
                # Lost the race to a concurrent claim.
                current = await db.execute(
                    select(User.login_streak, User.total_coins).where(User.id == user_id)
                )
                latest = current.one()
                outcome = DailyClaimResult(
                    claimed=False, streak=latest.login_streak, coins_awarded=0, total_coins=latest.total_coins
                )
            else:
                bonus = bonus_policy(streak)
                total = await add_coins(
                    db, user_id, bonus, "daily_claim",
                    source_id=f"daily:{calendar_day(now, tz).isoformat()}",
                )
                outcome = DailyClaimResult(claimed=True, streak=streak, coins_awarded=bonus, total_coins=total)

    if outcome.claimed:
        DAILY_CLAIMS.labels(outcome="claimed").inc()
        logger.info("User %d claimed daily bonus: streak %d, %d coins", user_id, outcome.streak, outcome.coins_awarded)
        await publish_coin_event(redis, user_id, outcome.coins_awarded, "daily_claim", outcome.total_coins)
    else:
        DAILY_CLAIMS.labels(outcome="already_claimed").inc()
        logger.info("User %d already claimed today's bonus", user_id)
    return outcome
