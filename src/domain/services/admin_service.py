"""Admin console: moderation of every profile and a view of every note."""

from typing import Callable
from uuid import UUID

import structlog

from core.exceptions import (
    AppException,
    AuthorizationError,
    BackendError,
    ConfirmationRequiredError,
    ProfileNotFoundError,
)
from domain.entities.account import AdminOverview, ProfileDeletion
from domain.entities.note import Note
from domain.entities.notice import ActionResult, Notice
from domain.entities.profile import Profile, ProfileFieldChange
from domain.entities.session import Session
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

ACCESS_DENIED_MESSAGE = "Access denied. Admin only."


class AdminService:
    """Service layer for the admin console.

    Every operation checks the caller's role before touching a repository.
    The check mirrors what the console shows; row-level policies in the
    database remain the real boundary.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_overview(self, session: Session | None) -> AdminOverview:
        """All profiles and all notes, unfiltered and unpaginated."""
        self._require_admin(session)
        async with self._uow_factory() as uow:
            profiles = await uow.profiles.list_all()
            notes = await uow.notes.list_all()
        return AdminOverview(profiles=profiles, notes=notes)

    async def list_profiles(self, session: Session | None) -> list[Profile]:
        self._require_admin(session)
        return await self._fetch_profiles()

    async def list_notes(self, session: Session | None) -> list[Note]:
        self._require_admin(session)
        async with self._uow_factory() as uow:
            return await uow.notes.list_all()  # type: ignore[no-any-return]

    async def update_profile_field(
        self,
        session: Session | None,
        user_id: UUID,
        change: ProfileFieldChange,
    ) -> ActionResult[list[Profile]]:
        """Write one enumerated field, then refetch every profile.

        The refetch happens whether or not the write succeeded, so the
        returned list always reflects what the store holds.
        """
        self._require_admin(session)

        error: AppException | None = None
        try:
            async with self._uow_factory() as uow:
                updated = await uow.profiles.update_fields(user_id, **{change.field: change.value})
                if updated is None:
                    raise ProfileNotFoundError(str(user_id))
                await uow.commit()
            notice = Notice(
                title="User Updated",
                description=f"User {change.field} has been updated successfully.",
            )
            logger.info(
                "admin_profile_updated",
                user_id=str(user_id),
                field=change.field,
                value=change.value.value,
            )
        except (BackendError, ProfileNotFoundError) as e:
            error = e
            notice = Notice.failure(f"Failed to update user {change.field}. Please try again.")
            logger.warning(
                "admin_profile_update_failed",
                user_id=str(user_id),
                field=change.field,
                error_code=e.error_code.value,
            )

        profiles, error = await self._refetch_profiles(error)
        return ActionResult(notice=notice, data=profiles, error=error)

    async def delete_profile(
        self,
        session: Session | None,
        user_id: UUID,
        confirmed: bool,
    ) -> ActionResult[ProfileDeletion]:
        """Delete a profile document only.

        The identity stays with the identity provider and the user's notes
        stay in place; their number is reported as orphaned.
        """
        self._require_admin(session)
        if not confirmed:
            raise ConfirmationRequiredError("delete user")

        error: AppException | None = None
        orphaned = 0
        try:
            async with self._uow_factory() as uow:
                orphaned = await uow.notes.count_for_user(user_id)
                if not await uow.profiles.delete(user_id):
                    raise ProfileNotFoundError(str(user_id))
                await uow.commit()
            notice = Notice(title="User Deleted", description="User has been deleted successfully.")
            logger.info("admin_profile_deleted", user_id=str(user_id), orphaned_notes=orphaned)
        except (BackendError, ProfileNotFoundError) as e:
            error = e
            orphaned = 0
            notice = Notice.failure("Failed to delete user. Please try again.")
            logger.warning(
                "admin_profile_delete_failed",
                user_id=str(user_id),
                error_code=e.error_code.value,
            )

        profiles, error = await self._refetch_profiles(error)
        return ActionResult(
            notice=notice,
            data=ProfileDeletion(profiles=profiles, orphaned_notes=orphaned),
            error=error,
        )

    async def _fetch_profiles(self) -> list[Profile]:
        async with self._uow_factory() as uow:
            return await uow.profiles.list_all()  # type: ignore[no-any-return]

    async def _refetch_profiles(
        self, error: AppException | None
    ) -> tuple[list[Profile], AppException | None]:
        """Refetch after a mutation without letting a read failure hide its notice.

        A failed refetch yields an empty list; the write's own error, if any,
        takes precedence over the read's.
        """
        try:
            return await self._fetch_profiles(), error
        except BackendError as e:
            logger.warning("admin_profile_refetch_failed", error_code=e.error_code.value)
            return [], error or e

    def _require_admin(self, session: Session | None) -> None:
        if session is None or not session.is_admin:
            raise AuthorizationError(ACCESS_DENIED_MESSAGE)
