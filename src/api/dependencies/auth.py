"""Authentication dependencies for FastAPI."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies.services import get_session_service
from core.exceptions import AccountDisabledError, AuthenticationError, ErrorCode
from domain.entities.session import Session
from domain.repositories.identity_provider import IIdentityProvider
from domain.services.session_context import SessionContext
from domain.services.session_service import SessionService
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.supabase_identity import SupabaseIdentityProvider

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]

# Singleton token validator
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the token validator singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


def get_identity_provider(
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> IIdentityProvider:
    """Create an identity provider client for this request only.

    Each request gets its own client so auth-state events never reach
    another caller's session context.
    """
    return SupabaseIdentityProvider(token_validator=auth_provider)


async def get_session_context(
    credentials: Credentials,
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    session_service: SessionService = Depends(get_session_service),
) -> AsyncIterator[SessionContext]:
    """
    Request-scoped session context.

    Subscribes to the identity provider, replays the bearer token (if any)
    as the initial auth-state event, and unsubscribes once the response is
    done.
    """
    context = SessionContext(identity_provider, session_service)
    await context.init()
    try:
        await context.restore(credentials.credentials if credentials else None)
        yield context
    finally:
        await context.teardown()


SessionCtx = Annotated[SessionContext, Depends(get_session_context)]


async def get_current_session(credentials: Credentials, context: SessionCtx) -> Session:
    """
    Dependency to get the signed-in user's session.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if context.session is None:
        if not credentials:
            raise AuthenticationError(
                message="Authorization header required",
                error_code=ErrorCode.UNAUTHORIZED,
            )
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )
    return context.session


CurrentSession = Annotated[Session, Depends(get_current_session)]


async def get_active_session(session: CurrentSession) -> Session:
    """
    Dependency for views that banned or disabled accounts may not use.

    Raises:
        AccountDisabledError: If the profile status is not active
    """
    if not session.profile.is_active:
        raise AccountDisabledError(session.status.value)
    return session


ActiveSession = Annotated[Session, Depends(get_active_session)]
