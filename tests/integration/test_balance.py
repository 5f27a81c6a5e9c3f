"""Coin balance mutator, conversion to credits and the transaction helper."""

from __future__ import annotations

import pytest
from sqlalchemy import select, text

from verdict_path.coins.balance_service import (
    add_coins,
    convert_coins,
    get_balance,
    list_conversions,
    spend_coins,
)
from verdict_path.database import atomic
from verdict_path.db.models import CoinConversion, CoinLedger
from verdict_path.errors import ConversionCapExceeded, InsufficientCoins, StorageError, UserNotFound


async def _fund(db, user_id: int, amount: int) -> None:
    async with atomic(db):
        await add_coins(db, user_id, amount, "test_grant")


class TestMutator:
    @pytest.mark.asyncio
    async def test_add_returns_new_total(self, db_session, make_user):
        user_id = await make_user()
        async with atomic(db_session):
            assert await add_coins(db_session, user_id, 20, "test_grant") == 20
            assert await add_coins(db_session, user_id, 5, "test_grant") == 25

    @pytest.mark.asyncio
    async def test_add_zero_is_allowed(self, db_session, make_user):
        user_id = await make_user()
        async with atomic(db_session):
            assert await add_coins(db_session, user_id, 0, "test_grant") == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [-1, 2.5, True])
    async def test_add_rejects_bad_amounts(self, db_session, make_user, amount):
        user_id = await make_user()
        with pytest.raises(ValueError):
            await add_coins(db_session, user_id, amount, "test_grant")

    @pytest.mark.asyncio
    async def test_add_to_missing_user(self, db_session, db_engine):
        with pytest.raises(UserNotFound):
            async with atomic(db_session):
                await add_coins(db_session, 5150, 10, "test_grant")

    @pytest.mark.asyncio
    async def test_spend_never_goes_negative(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 10)
        with pytest.raises(InsufficientCoins):
            async with atomic(db_session):
                await spend_coins(db_session, user_id, 11, "test_spend")

        balance = await get_balance(db_session, user_id)
        assert balance.available_coins == 10
        assert balance.coins_spent == 0

    @pytest.mark.asyncio
    async def test_spend_keeps_earned_total(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 30)
        async with atomic(db_session):
            assert await spend_coins(db_session, user_id, 12, "test_spend") == 18

        balance = await get_balance(db_session, user_id)
        assert balance.total_coins == 30
        assert balance.coins_spent == 12
        assert balance.available_coins == 18


class TestConversion:
    @pytest.mark.asyncio
    async def test_converts_multiple_of_rate(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 45)

        result = await convert_coins(db_session, user_id, 30)
        assert result.coins_converted == 30
        assert result.credit_amount == 3
        assert result.balance.available_coins == 15
        assert result.balance.lifetime_credits == 3
        assert result.balance.remaining_lifetime_credits == 2

        reasons = (await db_session.execute(
            select(CoinLedger.reason, CoinLedger.amount).where(CoinLedger.user_id == user_id).order_by(CoinLedger.id)
        )).all()
        assert [(r.reason, r.amount) for r in reasons] == [("test_grant", 45), ("conversion", -30)]

    @pytest.mark.asyncio
    async def test_lifetime_cap(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 100)
        await convert_coins(db_session, user_id, 40)

        with pytest.raises(ConversionCapExceeded, match="1 remaining"):
            await convert_coins(db_session, user_id, 20)

        balance = await get_balance(db_session, user_id)
        assert balance.available_coins == 60
        conversions = (await db_session.execute(
            select(CoinConversion.credit_amount).where(CoinConversion.user_id == user_id)
        )).scalars().all()
        assert conversions == [4]

    @pytest.mark.asyncio
    async def test_insufficient_coins_rolls_back(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 15)
        with pytest.raises(InsufficientCoins):
            await convert_coins(db_session, user_id, 20)

        balance = await get_balance(db_session, user_id)
        assert balance.lifetime_credits == 0
        assert balance.available_coins == 15

    @pytest.mark.asyncio
    @pytest.mark.parametrize("coins", [0, 15, -10])
    async def test_rejects_non_multiples(self, db_session, make_user, coins):
        user_id = await make_user()
        with pytest.raises(ValueError, match="multiple of 10"):
            await convert_coins(db_session, user_id, coins)

    @pytest.mark.asyncio
    async def test_missing_user(self, db_session, db_engine):
        with pytest.raises(UserNotFound):
            await convert_coins(db_session, 8080, 10)


class TestAtomic:
    @pytest.mark.asyncio
    async def test_sql_failure_becomes_storage_error(self, db_session, make_user):
        user_id = await make_user()
        with pytest.raises(StorageError):
            async with atomic(db_session):
                await add_coins(db_session, user_id, 10, "test_grant")
                await db_session.execute(text("SELECT * FROM no_such_table"))

        balance = await get_balance(db_session, user_id)
        assert balance.total_coins == 0


class TestConversionHistory:
    @pytest.mark.asyncio
    async def test_newest_first(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 50)
        await convert_coins(db_session, user_id, 10)
        await convert_coins(db_session, user_id, 30)

        history = await list_conversions(db_session, user_id)
        assert [c.credit_amount for c in history] == [3, 1]
        assert all(c.conversion_rate == 10 for c in history)

    @pytest.mark.asyncio
    async def test_limit(self, db_session, make_user):
        user_id = await make_user()
        await _fund(db_session, user_id, 50)
        for _ in range(3):
            await convert_coins(db_session, user_id, 10)
        assert len(await list_conversions(db_session, user_id, limit=2)) == 2

    @pytest.mark.asyncio
    async def test_empty_and_missing_user(self, db_session, make_user):
        user_id = await make_user()
        assert await list_conversions(db_session, user_id) == []
        with pytest.raises(UserNotFound):
            await list_conversions(db_session, 6060)
