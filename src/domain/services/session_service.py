"""Session resolution: joins an identity with its profile."""

from typing import Callable

import structlog

from domain.entities.profile import Profile
from domain.entities.session import Identity, Session
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class SessionService:
    """Resolves and bootstraps the profile behind a signed-in identity."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork], admin_email: str) -> None:
        self._uow_factory = uow_factory
        self._admin_email = admin_email

    async def resolve(self, identity: Identity) -> Session:
        """Build the session for an identity, creating its profile on first sight.

        An existing profile is returned untouched. A missing one is written
        with bootstrap defaults through a conditional insert, so when two
        first sign-ins race the earlier write is kept and both callers see it.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(identity.id)
            if profile is None:
                defaults = Profile.bootstrap(identity.id, identity.email, self._admin_email)
                profile = await uow.profiles.create_if_absent(defaults)
                await uow.commit()
                logger.info(
                    "profile_bootstrapped",
                    user_id=str(identity.id),
                    role=profile.role.value,
                )
            return Session(identity=identity, profile=profile)

    async def register(self, identity: Identity) -> Profile:
        """Write sign-up defaults for a freshly created identity (last write wins)."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.save(Profile.for_sign_up(identity.id, identity.email))
            await uow.commit()
            logger.info("profile_registered", user_id=str(identity.id))
            return profile
