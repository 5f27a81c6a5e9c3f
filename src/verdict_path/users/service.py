"""User lookups shared by the ledger services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import select

from verdict_path.db.models import User
from verdict_path.errors import UserNotFound

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def require_user(db: AsyncSession, user_id: int) -> None:
    """Raise UserNotFound unless the user row exists."""
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise UserNotFound(user_id)


async def create_user(db: AsyncSession, display_name: str | None = None) -> User:
    """Insert a user with an empty balance. Account signup lives elsewhere; used by fixtures and scripts."""
    user = User(
        display_name=display_name,
        total_coins=0,
        coins_spent=0,
        login_streak=0,
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    await db.flush()
    return user
