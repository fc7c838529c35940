"""Unit tests for AdminService."""

from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AuthorizationError,
    BackendError,
    ConfirmationRequiredError,
    ErrorCode,
)
from domain.entities.note import Note
from domain.entities.notice import NoticeVariant
from domain.entities.profile import (
    AccountStatus,
    Profile,
    ProfileFieldChange,
    ProfileRole,
    Subscription,
)
from domain.entities.session import Session
from domain.services.admin_service import ACCESS_DENIED_MESSAGE, AdminService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> AdminService:
    return AdminService(lambda: uow)


# --- access control ---


class TestAccessControl:
    @pytest.mark.asyncio
    async def test_non_admin_is_denied_before_any_read(
        self, service: AdminService, uow: FakeUnitOfWork, user_session: Session
    ):
        with pytest.raises(AuthorizationError) as exc_info:
            await service.get_overview(user_session)

        assert exc_info.value.message == ACCESS_DENIED_MESSAGE
        assert exc_info.value.status_code == 403
        uow.profiles.list_all.assert_not_called()
        uow.notes.list_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_signed_out_is_denied(self, service: AdminService, uow: FakeUnitOfWork):
        with pytest.raises(AuthorizationError):
            await service.list_profiles(None)

        uow.profiles.list_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_admin_cannot_update(
        self, service: AdminService, uow: FakeUnitOfWork, user_session: Session
    ):
        change = ProfileFieldChange(field="role", value=ProfileRole.ADMIN)

        with pytest.raises(AuthorizationError):
            await service.update_profile_field(user_session, user_session.id, change)

        uow.profiles.update_fields.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_admin_cannot_delete(
        self, service: AdminService, uow: FakeUnitOfWork, user_session: Session
    ):
        with pytest.raises(AuthorizationError):
            await service.delete_profile(user_session, uuid4(), confirmed=True)

        uow.profiles.delete.assert_not_called()


# --- reads ---


class TestOverview:
    @pytest.mark.asyncio
    async def test_returns_all_profiles_and_notes(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session
    ):
        profiles = [Profile(id=uuid4(), email=f"u{i}@example.com") for i in range(3)]
        notes = [Note(user_id=profiles[0].id, title="a"), Note(user_id=uuid4(), title="b")]
        uow.profiles.list_all.return_value = profiles
        uow.notes.list_all.return_value = notes

        overview = await service.get_overview(admin_session)

        assert overview.profiles == profiles
        assert overview.notes == notes

    @pytest.mark.asyncio
    async def test_list_notes(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session
    ):
        uow.notes.list_all.return_value = []

        assert await service.list_notes(admin_session) == []


# --- update_profile_field ---


class TestUpdateProfileField:
    @pytest.mark.asyncio
    async def test_status_change_is_visible_in_refetched_list(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        banned = Profile(id=user_id, email="u@example.com", status=AccountStatus.BANNED)
        uow.profiles.update_fields.return_value = banned
        uow.profiles.list_all.return_value = [banned]

        result = await service.update_profile_field(
            admin_session,
            user_id,
            ProfileFieldChange(field="status", value=AccountStatus.BANNED),
        )

        uow.profiles.update_fields.assert_called_once_with(user_id, status=AccountStatus.BANNED)
        assert result.succeeded
        assert result.notice.title == "User Updated"
        assert result.notice.description == "User status has been updated successfully."
        assert result.notice.variant == NoticeVariant.DEFAULT
        assert result.data[0].status == AccountStatus.BANNED
        assert uow.committed

    @pytest.mark.asyncio
    async def test_backend_failure_returns_destructive_notice_and_refetches(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        unchanged = Profile(id=user_id, email="u@example.com")
        uow.profiles.update_fields.side_effect = BackendError("profiles.update_fields")
        uow.profiles.list_all.return_value = [unchanged]

        result = await service.update_profile_field(
            admin_session,
            user_id,
            ProfileFieldChange(field="subscription", value=Subscription.PREMIUM),
        )

        assert not result.succeeded
        assert result.error is not None
        assert result.error.error_code == ErrorCode.BACKEND_ERROR
        assert result.notice.title == "Error"
        assert result.notice.description == "Failed to update user subscription. Please try again."
        assert result.notice.variant == NoticeVariant.DESTRUCTIVE
        assert result.data == [unchanged]
        uow.profiles.list_all.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_profile_reports_not_found(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session
    ):
        uow.profiles.update_fields.return_value = None
        uow.profiles.list_all.return_value = []

        result = await service.update_profile_field(
            admin_session, uuid4(), ProfileFieldChange(field="role", value=ProfileRole.ADMIN)
        )

        assert result.error is not None
        assert result.error.status_code == 404
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_refetch_failure_keeps_the_committed_update_notice(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        uow.profiles.update_fields.return_value = Profile(
            id=user_id, email="u@example.com", status=AccountStatus.BANNED
        )
        uow.profiles.list_all.side_effect = BackendError("profiles.list_all")

        result = await service.update_profile_field(
            admin_session,
            user_id,
            ProfileFieldChange(field="status", value=AccountStatus.BANNED),
        )

        assert uow.committed
        assert result.notice.title == "User Updated"
        assert result.data == []
        assert result.error is not None
        assert result.error.error_code == ErrorCode.BACKEND_ERROR

    @pytest.mark.asyncio
    async def test_write_error_wins_over_refetch_error(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session
    ):
        uow.profiles.update_fields.return_value = None
        uow.profiles.list_all.side_effect = BackendError("profiles.list_all")

        result = await service.update_profile_field(
            admin_session, uuid4(), ProfileFieldChange(field="role", value=ProfileRole.USER)
        )

        assert result.error is not None
        assert result.error.status_code == 404
        assert result.notice.variant == NoticeVariant.DESTRUCTIVE


# --- delete_profile ---


class TestDeleteProfile:
    @pytest.mark.asyncio
    async def test_requires_confirmation(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session
    ):
        with pytest.raises(ConfirmationRequiredError):
            await service.delete_profile(admin_session, uuid4(), confirmed=False)

        uow.profiles.delete.assert_not_called()
        uow.notes.count_for_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_deletes_profile_and_reports_orphaned_notes(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        uow.notes.count_for_user.return_value = 4
        uow.profiles.delete.return_value = True
        uow.profiles.list_all.return_value = []

        result = await service.delete_profile(admin_session, user_id, confirmed=True)

        uow.profiles.delete.assert_called_once_with(user_id)
        assert result.succeeded
        assert result.notice.title == "User Deleted"
        assert result.notice.description == "User has been deleted successfully."
        assert result.data.orphaned_notes == 4
        assert result.data.profiles == []

    @pytest.mark.asyncio
    async def test_failure_returns_destructive_notice(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        remaining = [Profile(id=user_id, email="u@example.com")]
        uow.notes.count_for_user.return_value = 2
        uow.profiles.delete.side_effect = BackendError("profiles.delete")
        uow.profiles.list_all.return_value = remaining

        result = await service.delete_profile(admin_session, user_id, confirmed=True)

        assert not result.succeeded
        assert result.notice.description == "Failed to delete user. Please try again."
        assert result.notice.variant == NoticeVariant.DESTRUCTIVE
        assert result.data.orphaned_notes == 0
        assert result.data.profiles == remaining

    @pytest.mark.asyncio
    async def test_refetch_failure_keeps_the_committed_delete_notice(
        self, service: AdminService, uow: FakeUnitOfWork, admin_session: Session, user_id: UUID
    ):
        uow.notes.count_for_user.return_value = 3
        uow.profiles.delete.return_value = True
        uow.profiles.list_all.side_effect = BackendError("profiles.list_all")

        result = await service.delete_profile(admin_session, user_id, confirmed=True)

        assert uow.committed
        assert result.notice.title == "User Deleted"
        assert result.data.profiles == []
        assert result.data.orphaned_notes == 3
        assert result.error is not None
        assert result.error.error_code == ErrorCode.BACKEND_ERROR
