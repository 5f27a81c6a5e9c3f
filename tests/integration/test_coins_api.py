"""Coin endpoints over HTTP."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestDailyClaimEndpoint:
    @pytest.mark.asyncio
    async def test_claim_then_repeat(self, client: AsyncClient, make_user):
        user_id = await make_user()
        first = await client.post(f"/api/v1/users/{user_id}/coins/claim-daily")
        assert first.status_code == 200
        assert first.json() == {"claimed": True, "streak": 1, "coins_awarded": 5, "total_coins": 5}

        second = await client.post(f"/api/v1/users/{user_id}/coins/claim-daily")
        assert second.json()["claimed"] is False
        assert second.json()["total_coins"] == 5

    @pytest.mark.asyncio
    async def test_missing_user(self, client: AsyncClient):
        response = await client.post("/api/v1/users/12345/coins/claim-daily")
        assert response.status_code == 404


class TestBalanceEndpoint:
    @pytest.mark.asyncio
    async def test_balance_reflects_awards(self, client: AsyncClient, make_user):
        user_id = await make_user()
        await client.post(f"/api/v1/users/{user_id}/litigation/substages/pre-9/complete")

        response = await client.get(f"/api/v1/users/{user_id}/coins/balance")
        assert response.status_code == 200
        assert response.json() == {
            "total_coins": 35,
            "coins_spent": 0,
            "available_coins": 35,
            "lifetime_credits": 0,
            "max_lifetime_credits": 5,
            "remaining_lifetime_credits": 5,
        }


class TestConvertEndpoint:
    @pytest.mark.asyncio
    async def test_convert(self, client: AsyncClient, make_user):
        user_id = await make_user()
        await client.post(f"/api/v1/users/{user_id}/litigation/substages/pre-9/complete")

        response = await client.post(f"/api/v1/users/{user_id}/coins/convert", json={"coins": 30})
        assert response.status_code == 200
        data = response.json()
        assert data["credit_amount"] == 3
        assert data["balance"]["available_coins"] == 5

    @pytest.mark.asyncio
    async def test_not_a_multiple(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/coins/convert", json={"coins": 25})
        assert response.status_code == 400
        assert "multiple of 10" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_insufficient_coins(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/coins/convert", json={"coins": 10})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_positive_rejected_by_schema(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/coins/convert", json={"coins": 0})
        assert response.status_code == 422


class TestConversionHistoryEndpoint:
    @pytest.mark.asyncio
    async def test_lists_conversions(self, client: AsyncClient, make_user):
        user_id = await make_user()
        await client.post(f"/api/v1/users/{user_id}/litigation/substages/pre-9/complete")
        await client.post(f"/api/v1/users/{user_id}/coins/convert", json={"coins": 20})

        response = await client.get(f"/api/v1/users/{user_id}/coins/conversions")
        assert response.status_code == 200
        conversions = response.json()["conversions"]
        assert len(conversions) == 1
        assert conversions[0]["coins_converted"] == 20
        assert conversions[0]["credit_amount"] == 2
        assert "converted_at" in conversions[0]

    @pytest.mark.asyncio
    async def test_missing_user(self, client: AsyncClient):
        response = await client.get("/api/v1/users/777/coins/conversions")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_limit_bounds(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.get(f"/api/v1/users/{user_id}/coins/conversions", params={"limit": 0})
        assert response.status_code == 422
