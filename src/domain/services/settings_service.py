"""Self-service account settings."""

from typing import Callable

import structlog

from core.exceptions import (
    AuthError,
    AuthenticationError,
    BackendError,
    ConfirmationRequiredError,
    ProfileNotFoundError,
)
from domain.entities.account import AccountDeletion, AccountSettings
from domain.entities.notice import ActionResult, Notice
from domain.entities.profile import Profile, Subscription
from domain.entities.session import Session
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_context import SessionContext

logger = structlog.get_logger()


class SettingsService:
    """Service layer for the settings view. Operates on the caller's own profile."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_settings(self, session: Session) -> AccountSettings:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(session.id)
        if profile is None:
            raise ProfileNotFoundError(str(session.id))
        return self._to_settings(session, profile)

    async def update_name(self, session: Session, name: str) -> ActionResult[AccountSettings | None]:
        """Save the display name. Email and subscription are read-only here."""
        try:
            profile = await self._update(session, name=name)
        except (BackendError, ProfileNotFoundError) as e:
            logger.warning("settings_update_failed", user_id=str(session.id), error_code=e.error_code.value)
            return ActionResult(
                notice=Notice.failure("Failed to update settings. Please try again."),
                data=None,
                error=e,
            )
        return ActionResult(
            notice=Notice(
                title="Settings Updated",
                description="Your settings have been updated successfully.",
            ),
            data=self._to_settings(session, profile),
        )

    async def cancel_subscription(self, session: Session) -> ActionResult[AccountSettings | None]:
        """Drop the caller to the Free tier, whatever the current tier is.

        No billing system is involved.
        """
        try:
            profile = await self._update(session, subscription=Subscription.FREE)
        except (BackendError, ProfileNotFoundError) as e:
            logger.warning("subscription_cancel_failed", user_id=str(session.id), error_code=e.error_code.value)
            return ActionResult(
                notice=Notice.failure("Failed to cancel subscription. Please try again."),
                data=None,
                error=e,
            )
        logger.info("subscription_cancelled", user_id=str(session.id))
        return ActionResult(
            notice=Notice(
                title="Subscription Cancelled",
                description="Your subscription has been cancelled successfully.",
            ),
            data=self._to_settings(session, profile),
        )

    async def delete_account(
        self, context: SessionContext, confirmed: bool
    ) -> ActionResult[AccountDeletion | None]:
        """Delete the caller's profile and sign them out.

        Steps run in this order: count the notes that will be orphaned,
        delete the profile, sign out. The identity record and the notes are
        not removed. If the profile delete fails nothing else happens; if
        sign-out fails the profile is already gone and the failure is
        reported.
        """
        session = context.session
        if session is None:
            raise AuthenticationError("Please sign in to access settings.")
        if not confirmed:
            raise ConfirmationRequiredError("delete account")

        try:
            async with self._uow_factory() as uow:
                orphaned = await uow.notes.count_for_user(session.id)
                if not await uow.profiles.delete(session.id):
                    raise ProfileNotFoundError(str(session.id))
                await uow.commit()
            await context.sign_out()
        except (BackendError, ProfileNotFoundError, AuthError) as e:
            logger.warning("account_delete_failed", user_id=str(session.id), error_code=e.error_code.value)
            return ActionResult(
                notice=Notice.failure("Failed to delete account. Please try again."),
                data=None,
                error=e,
            )

        logger.info("account_deleted", user_id=str(session.id), orphaned_notes=orphaned)
        return ActionResult(
            notice=Notice(
                title="Account Deleted",
                description="Your account has been deleted successfully.",
            ),
            data=AccountDeletion(orphaned_notes=orphaned),
        )

    async def _update(self, session: Session, **fields: object) -> Profile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.update_fields(session.id, **fields)
            if profile is None:
                raise ProfileNotFoundError(str(session.id))
            await uow.commit()
            return profile

    def _to_settings(self, session: Session, profile: Profile) -> AccountSettings:
        return AccountSettings(
            name=profile.name or "",
            email=session.email,
            subscription=profile.subscription.value,
        )
