"""Integration tests for the settings API."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.entities.session import Identity
from infrastructure.database.models import ProfileModel
from tests.conftest import FakeIdentityDirectory


class TestGetSettings:
    @pytest.mark.asyncio
    async def test_defaults_for_new_profile(
        self, authenticated_client: AsyncClient, test_identity: Identity
    ):
        response = await authenticated_client.get("/api/v1/settings")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "name": "",
            "email": test_identity.email,
            "subscription": "Free",
        }

    @pytest.mark.asyncio
    async def test_requires_sign_in(self, client: AsyncClient):
        response = await client.get("/api/v1/settings")

        assert response.status_code == 401


class TestUpdateSettings:
    @pytest.mark.asyncio
    async def test_updates_name(self, authenticated_client: AsyncClient):
        response = await authenticated_client.patch("/api/v1/settings", json={"name": "Ada"})

        assert response.status_code == 200
        body = response.json()
        assert body["notice"]["title"] == "Settings Updated"
        assert body["data"]["name"] == "Ada"

        refetched = await authenticated_client.get("/api/v1/settings")
        assert refetched.json()["data"]["name"] == "Ada"

    @pytest.mark.asyncio
    async def test_name_length_is_limited(self, authenticated_client: AsyncClient):
        response = await authenticated_client.patch("/api/v1/settings", json={"name": "x" * 101})

        assert response.status_code == 422


class TestCancelSubscription:
    @pytest.mark.asyncio
    async def test_premium_becomes_free(
        self,
        authenticated_client: AsyncClient,
        test_identity: Identity,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            session.add(
                ProfileModel(id=test_identity.id, email=test_identity.email, subscription="Premium")
            )
            await session.commit()

        response = await authenticated_client.post("/api/v1/settings/subscription/cancel")

        assert response.status_code == 200
        assert response.json()["notice"]["title"] == "Subscription Cancelled"
        refetched = await authenticated_client.get("/api/v1/settings")
        assert refetched.json()["data"]["subscription"] == "Free"


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_requires_confirm_flag(
        self, authenticated_client: AsyncClient, test_identity: Identity, get_profile_row
    ):
        response = await authenticated_client.delete("/api/v1/settings/account")

        assert response.status_code == 400
        assert await get_profile_row(test_identity.id) is not None

    @pytest.mark.asyncio
    async def test_deletes_profile_and_signs_out(
        self,
        authenticated_client: AsyncClient,
        auth_headers: dict[str, str],
        test_identity: Identity,
        identity_directory: FakeIdentityDirectory,
        seed_notes,
        get_profile_row,
    ):
        await seed_notes(test_identity.id, [("mine", "x", datetime(2026, 3, 1))])

        response = await authenticated_client.delete(
            "/api/v1/settings/account", params={"confirm": "true"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["notice"]["title"] == "Account Deleted"
        assert body["notice"]["description"] == "Your account has been deleted successfully."
        assert body["data"] == {"redirect_to": "/", "orphaned_notes": 1}
        assert await get_profile_row(test_identity.id) is None
        assert identity_directory.revoked == [auth_headers["Authorization"].split(" ", 1)[1]]
        assert test_identity.email in identity_directory.accounts

    @pytest.mark.asyncio
    async def test_requires_sign_in(self, client: AsyncClient):
        response = await client.delete("/api/v1/settings/account", params={"confirm": "true"})

        assert response.status_code == 401
