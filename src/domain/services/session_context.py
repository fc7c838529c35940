"""Session context: the signed-in user as seen by every console view."""

from typing import Callable

import structlog

from domain.entities.session import AuthTokens, Identity, Session
from domain.repositories.identity_provider import IIdentityProvider
from domain.services.session_service import SessionService

logger = structlog.get_logger()


class SessionContext:
    """Follows an identity provider's auth-state stream and publishes sessions.

    Lifecycle: ``init()`` subscribes to the provider, ``teardown()``
    unsubscribes. Views read ``session`` but never assign it; it changes only
    in response to auth-state events.
    """

    def __init__(self, identity_provider: IIdentityProvider, sessions: SessionService) -> None:
        self._provider = identity_provider
        self._sessions = sessions
        self._session: Session | None = None
        self._loading = True
        self._active = False
        self._unsubscribe: Callable[[], None] | None = None
        # Set while a sign-up is in flight; its auth-state event is held here
        self._signing_up = False
        self._signed_up_identity: Identity | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def loading(self) -> bool:
        """True until the first auth-state event has been handled."""
        return self._loading

    @property
    def active(self) -> bool:
        return self._active

    async def init(self) -> None:
        if self._active:
            return
        self._unsubscribe = self._provider.on_auth_state_change(self._on_auth_state_changed)
        self._active = True

    async def teardown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._active = False

    async def restore(self, access_token: str | None) -> Session | None:
        """Resume a session from a bearer token (or start signed out)."""
        await self._provider.restore_session(access_token)
        return self._session

    async def sign_up(self, email: str, password: str) -> None:
        """Create credentials, then write the sign-up profile defaults.

        Sign-up always yields a ``user`` profile on the Free plan, even for
        the administrator address; the admin bootstrap applies only to
        identities first seen at sign-in. An auth-state event raised by the
        sign-up itself (auto-confirmed projects) is not resolved, since that
        would bootstrap a profile only to overwrite it; the session is
        published once the sign-up profile is written.

        If the profile write fails the identity is left without a profile;
        the next ``resolve`` on sign-in creates it.
        """
        self._signing_up = True
        self._signed_up_identity = None
        try:
            identity = await self._provider.sign_up(email, password)
        finally:
            self._signing_up = False
        started = self._signed_up_identity
        self._signed_up_identity = None

        profile = await self._sessions.register(identity)
        if started is not None and started.id == identity.id:
            self._publish(Session(identity=started, profile=profile))

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        return await self._provider.sign_in(email, password)

    async def sign_out(self) -> None:
        await self._provider.sign_out()

    async def _on_auth_state_changed(self, identity: Identity | None) -> None:
        if identity is None:
            self._publish(None)
            return
        if self._signing_up:
            self._signed_up_identity = identity
            return

        session = await self._sessions.resolve(identity)
        if not self._active:
            # Torn down while the profile lookup was in flight
            logger.debug("session_resolution_dropped", user_id=str(identity.id))
            return
        self._publish(session)

    def _publish(self, session: Session | None) -> None:
        if not self._active:
            return
        self._session = session
        self._loading = False
