"""Supabase Auth (GoTrue) client.

Talks to the project's ``/auth/v1`` REST API for credential operations and
keeps track of one caller's current session. Every change of that session
is pushed to the registered auth-state listeners, in registration order.
"""

from typing import Any, Callable, Optional

import httpx
import structlog

from core.config import settings
from core.exceptions import AuthError, ErrorCode
from domain.entities.session import AuthTokens, Identity
from domain.repositories.identity_provider import AuthStateListener
from infrastructure.auth.jwt_provider import identity_from_claims
from infrastructure.auth.provider import IAuthProvider

logger = structlog.get_logger()

# GoTrue error codes that mean "this address already has an account"
_ALREADY_REGISTERED = {"user_already_exists", "email_exists"}


class SupabaseIdentityProvider:
    """Identity provider backed by Supabase Auth."""

    def __init__(
        self,
        token_validator: IAuthProvider,
        auth_url: str = settings.supabase_auth_url,
        api_key: str = settings.supabase_anon_key,
        timeout: float = settings.auth_request_timeout_seconds,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._token_validator = token_validator
        self._auth_url = auth_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._http_client = http_client
        self._listeners: list[AuthStateListener] = []
        self._access_token: str | None = None

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def on_auth_state_change(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def restore_session(self, access_token: str | None) -> Identity | None:
        """Adopt a bearer token issued earlier and notify listeners."""
        identity = None
        if access_token:
            identity = await self._token_validator.validate_token(access_token)
        self._access_token = access_token if identity else None
        await self._notify(identity)
        return identity

    async def sign_up(self, email: str, password: str) -> Identity:
        """Create credentials. Auto-confirmed projects also start a session."""
        body = await self._post("signup", {"email": email, "password": password})

        user = body.get("user") or body
        identity = identity_from_claims(user)
        if identity is None:
            raise AuthError(
                message="Sign-up response did not contain a user",
                error_code=ErrorCode.AUTH_REJECTED,
                status_code=400,
            )

        if body.get("access_token"):
            self._access_token = body["access_token"]
            await self._notify(identity)
        logger.info("identity_signed_up", user_id=str(identity.id))
        return identity

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        """Exchange email and password for tokens and notify listeners."""
        body = await self._post(
            "token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )

        identity = identity_from_claims(body.get("user") or {})
        if identity is None or not body.get("access_token"):
            raise AuthError(message="Sign-in response did not contain a session")

        tokens = AuthTokens(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            token_type=body.get("token_type", "bearer"),
            expires_in=body.get("expires_in"),
        )
        self._access_token = tokens.access_token
        await self._notify(identity)
        return tokens

    async def sign_out(self) -> None:
        """Revoke the current session (if any) and notify listeners with None."""
        token = self._access_token
        if token:
            response = await self._request(
                "logout",
                headers={"Authorization": f"Bearer {token}"},
            )
            # 401/403: the token was already revoked or expired
            if response.status_code >= 400 and response.status_code not in (401, 403):
                self._raise_for_error(response)
        self._access_token = None
        await self._notify(None)

    async def _notify(self, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            await listener(identity)

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._request(path, json=payload, params=params)
        if response.status_code >= 400:
            self._raise_for_error(response)
        return response.json()  # type: ignore[no-any-return]

    async def _request(self, path: str, **kwargs: Any) -> httpx.Response:
        if not self._auth_url:
            raise AuthError(
                message="Identity provider is not configured",
                error_code=ErrorCode.AUTH_PROVIDER_UNAVAILABLE,
                status_code=503,
            )

        headers = {"apikey": self._api_key, **kwargs.pop("headers", {})}
        url = f"{self._auth_url}/{path}"
        try:
            if self._http_client is not None:
                return await self._http_client.post(
                    url, headers=headers, timeout=self._timeout, **kwargs
                )
            async with httpx.AsyncClient() as client:
                return await client.post(url, headers=headers, timeout=self._timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("identity_provider_unreachable", path=path, error=str(e))
            raise AuthError(
                message="Identity provider is unavailable",
                error_code=ErrorCode.AUTH_PROVIDER_UNAVAILABLE,
                status_code=503,
            ) from e

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Map a GoTrue error response onto AuthError."""
        try:
            body = response.json()
        except ValueError:
            body = {}

        code = body.get("error_code") or body.get("error") or ""
        message = (
            body.get("msg")
            or body.get("error_description")
            or body.get("message")
            or "Identity provider rejected the request"
        )
        logger.info(
            "identity_provider_rejected",
            status_code=response.status_code,
            error_code=code,
        )

        if response.status_code >= 500:
            raise AuthError(
                message="Identity provider is unavailable",
                error_code=ErrorCode.AUTH_PROVIDER_UNAVAILABLE,
                status_code=503,
            )
        if code in _ALREADY_REGISTERED or "already registered" in message.lower():
            raise AuthError(
                message=message,
                error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
                status_code=409,
            )
        if code in ("invalid_grant", "invalid_credentials") or response.status_code == 401:
            raise AuthError(message=message)
        raise AuthError(
            message=message,
            error_code=ErrorCode.AUTH_REJECTED,
            status_code=400,
        )
