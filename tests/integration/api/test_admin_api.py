"""Integration tests for the admin API."""

from datetime import datetime

import pytest
from httpx import AsyncClient

from domain.entities.session import Identity


@pytest.fixture
async def known_user(authenticated_client: AsyncClient, test_identity: Identity) -> Identity:
    """The regular test user, with a profile created by its first request."""
    await authenticated_client.get("/api/v1/auth/session")
    return test_identity


class TestAccessControl:
    @pytest.mark.asyncio
    async def test_non_admin_gets_403(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/v1/admin/overview")

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "FORBIDDEN"
        assert body["message"] == "Access denied. Admin only."

    @pytest.mark.asyncio
    async def test_signed_out_gets_401(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/users")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_patch(
        self, authenticated_client: AsyncClient, known_user: Identity
    ):
        response = await authenticated_client.patch(
            f"/api/v1/admin/users/{known_user.id}",
            json={"field": "role", "value": "admin"},
        )

        assert response.status_code == 403


class TestOverview:
    @pytest.mark.asyncio
    async def test_lists_every_user_and_note(
        self, admin_client: AsyncClient, known_user: Identity, seed_notes
    ):
        await seed_notes(
            known_user.id,
            [
                ("first", "hello", datetime(2026, 3, 1, 9)),
                ("second", None, datetime(2026, 3, 2, 9)),
            ],
        )

        response = await admin_client.get("/api/v1/admin/overview")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_count"] == 2
        assert data["note_count"] == 2
        assert {u["email"] for u in data["users"]} == {"admin@example.com", known_user.email}
        assert "content" not in data["notes"][0]

    @pytest.mark.asyncio
    async def test_separate_lists(self, admin_client: AsyncClient, known_user: Identity):
        users = await admin_client.get("/api/v1/admin/users")
        notes = await admin_client.get("/api/v1/admin/notes")

        assert len(users.json()["data"]) == 2
        assert notes.json()["data"] == []


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_status_change_appears_in_refetched_list(
        self, admin_client: AsyncClient, known_user: Identity
    ):
        response = await admin_client.patch(
            f"/api/v1/admin/users/{known_user.id}",
            json={"field": "status", "value": "banned"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["notice"] == {
            "title": "User Updated",
            "description": "User status has been updated successfully.",
            "variant": "default",
        }
        updated = next(u for u in body["data"] if u["id"] == str(known_user.id))
        assert updated["status"] == "banned"

    @pytest.mark.asyncio
    async def test_banned_user_is_locked_out_of_views(
        self,
        admin_client: AsyncClient,
        authenticated_client: AsyncClient,
        known_user: Identity,
    ):
        await admin_client.patch(
            f"/api/v1/admin/users/{known_user.id}",
            json={"field": "status", "value": "banned"},
        )

        session = await authenticated_client.get("/api/v1/auth/session")
        analytics = await authenticated_client.get("/api/v1/analytics")

        assert session.json()["data"]["session"]["status"] == "banned"
        assert analytics.status_code == 403
        assert analytics.json()["error_code"] == "ACCOUNT_DISABLED"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"field": "subscription", "value": "Gold"},
            {"field": "email", "value": "x@y.com"},
            {"field": "role", "value": "active"},
        ],
    )
    async def test_values_outside_closed_sets_are_rejected(
        self, admin_client: AsyncClient, known_user: Identity, payload: dict[str, str]
    ):
        response = await admin_client.patch(f"/api/v1/admin/users/{known_user.id}", json=payload)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_unknown_user_returns_destructive_notice(self, admin_client: AsyncClient):
        response = await admin_client.patch(
            "/api/v1/admin/users/00000000-0000-0000-0000-000000000000",
            json={"field": "role", "value": "admin"},
        )

        assert response.status_code == 404
        body = response.json()
        assert body["notice"]["variant"] == "destructive"
        assert body["notice"]["description"] == "Failed to update user role. Please try again."
        assert len(body["data"]) == 1


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_requires_confirm_flag(self, admin_client: AsyncClient, known_user: Identity):
        response = await admin_client.delete(f"/api/v1/admin/users/{known_user.id}")

        assert response.status_code == 400
        assert response.json()["error_code"] == "CONFIRMATION_REQUIRED"

    @pytest.mark.asyncio
    async def test_deletes_profile_and_keeps_notes(
        self, admin_client: AsyncClient, known_user: Identity, seed_notes, get_profile_row
    ):
        await seed_notes(known_user.id, [("kept", "x", datetime(2026, 3, 1))])

        response = await admin_client.delete(
            f"/api/v1/admin/users/{known_user.id}", params={"confirm": "true"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["notice"]["title"] == "User Deleted"
        assert body["data"]["orphaned_notes"] == 1
        assert [u["email"] for u in body["data"]["users"]] == ["admin@example.com"]
        assert await get_profile_row(known_user.id) is None

        notes = await admin_client.get("/api/v1/admin/notes")
        assert len(notes.json()["data"]) == 1
