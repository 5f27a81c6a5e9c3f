"""Litigation endpoints over HTTP."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestTaxonomyEndpoint:
    @pytest.mark.asyncio
    async def test_lists_stages(self, client: AsyncClient):
        response = await client.get("/api/v1/litigation/stages")
        assert response.status_code == 200
        data = response.json()
        assert data["total_substages"] == 44
        assert len(data["stages"]) == 9
        pre = data["stages"][0]
        assert pre["coins"] == 100
        assert {"id": "pre-9", "name": "Medical Records", "type": "upload", "coins": 35} in pre["substages"]


class TestCompletionEndpoints:
    @pytest.mark.asyncio
    async def test_complete_substage_twice(self, client: AsyncClient, make_user):
        user_id = await make_user()
        url = f"/api/v1/users/{user_id}/litigation/substages/res-3/complete"

        first = await client.post(url)
        assert first.status_code == 200
        assert first.json() == {"already_completed": False, "coins_awarded": 30, "total_coins": 30}

        second = await client.post(url)
        assert second.status_code == 200
        assert second.json() == {"already_completed": True, "coins_awarded": 0, "total_coins": 30}

    @pytest.mark.asyncio
    async def test_unknown_substage_is_not_an_error(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/litigation/substages/zzz-999/complete")
        assert response.status_code == 200
        assert response.json()["coins_awarded"] == 0

    @pytest.mark.asyncio
    async def test_missing_user_404(self, client: AsyncClient):
        response = await client.post("/api/v1/users/99999/litigation/substages/pre-1/complete")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_complete_stage(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/litigation/stages/9/complete")
        assert response.status_code == 200
        assert response.json()["coins_awarded"] == 75

    @pytest.mark.asyncio
    async def test_unknown_stage_404(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/litigation/stages/12/complete")
        assert response.status_code == 404
        assert "Stage 12" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_long_unknown_substage_is_not_an_error(self, client: AsyncClient, make_user):
        user_id = await make_user()
        substage_id = "unknown-" + "a" * 40
        response = await client.post(f"/api/v1/users/{user_id}/litigation/substages/{substage_id}/complete")
        assert response.status_code == 200
        assert response.json()["coins_awarded"] == 0

    @pytest.mark.asyncio
    async def test_oversized_substage_id_rejected(self, client: AsyncClient, make_user):
        user_id = await make_user()
        response = await client.post(f"/api/v1/users/{user_id}/litigation/substages/{'z' * 129}/complete")
        assert response.status_code == 422


class TestProgressEndpoint:
    @pytest.mark.asyncio
    async def test_progress_after_completions(self, client: AsyncClient, make_user):
        user_id = await make_user()
        await client.post(f"/api/v1/users/{user_id}/litigation/substages/pre-1/complete")
        await client.post(f"/api/v1/users/{user_id}/litigation/substages/pre-4/complete")

        response = await client.get(f"/api/v1/users/{user_id}/litigation/progress")
        assert response.status_code == 200
        data = response.json()
        assert data["completed_substage_ids"] == ["pre-1", "pre-4"]
        assert data["percent_complete"] == 4.55
        assert data["coins_from_litigation"] == 15
        assert data["current_stage_id"] == 1
        assert data["total_substages"] == 44

    @pytest.mark.asyncio
    async def test_progress_missing_user(self, client: AsyncClient):
        response = await client.get("/api/v1/users/4040/litigation/progress")
        assert response.status_code == 404
