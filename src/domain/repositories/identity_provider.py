"""Identity provider protocol."""

from typing import Awaitable, Callable, Protocol

from domain.entities.session import AuthTokens, Identity

AuthStateListener = Callable[[Identity | None], Awaitable[None]]


class IIdentityProvider(Protocol):
    """Client for the external identity service.

    Each instance tracks one caller's auth session and notifies its
    listeners whenever that session changes.
    """

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        ...

    async def restore_session(self, access_token: str | None) -> Identity | None:
        """Adopt an existing access token and notify listeners."""
        ...

    async def sign_up(self, email: str, password: str) -> Identity:
        """Create credentials for a new identity."""
        ...

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        """Exchange email and password for tokens."""
        ...

    async def sign_out(self) -> None:
        """Revoke the current session and notify listeners with None."""
        ...
