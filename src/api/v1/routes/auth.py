"""Sign-up, sign-in and sign-out routes."""

from fastapi import APIRouter, Request, status

from api.dependencies.auth import SessionCtx
from api.v1.schemas.auth import (
    Credentials,
    SessionStateData,
    SessionStateResponse,
    SignInData,
    SignInResponse,
    SignUpResponse,
    TokenResponse,
)
from api.v1.schemas.common import ErrorResponse, NoticeResponse
from api.v1.schemas.profile import SessionResponse
from core.rate_limit import AUTH_LIMIT, READ_LIMIT, limiter
from domain.entities.notice import Notice
from domain.services.session_context import SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_state(context: SessionContext) -> SessionStateResponse:
    session = context.session
    return SessionStateResponse(
        data=SessionStateData(
            session=SessionResponse.from_session(session) if session else None,
            loading=context.loading,
        )
    )


@router.get("/session", response_model=SessionStateResponse, summary="Current session")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_session(request: Request, context: SessionCtx) -> SessionStateResponse:
    """The signed-in user merged with their profile, or null. Never 401."""
    return _session_state(context)


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        201: {"description": "Account created"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    body: Credentials,
    context: SessionCtx,
) -> SignUpResponse:
    """Create credentials and a Free profile.

    The session is null when the identity provider requires email
    confirmation before the first sign-in.
    """
    await context.sign_up(body.email, body.password)
    if context.session is not None:
        notice = Notice(
            title="Account Created",
            description="Your account has been created successfully.",
        )
    else:
        notice = Notice(
            title="Confirm Your Email",
            description="Check your inbox to confirm your account, then sign in.",
        )
    return SignUpResponse(
        notice=NoticeResponse.model_validate(notice),
        data=_session_state(context).data,
    )


@router.post(
    "/sign-in",
    response_model=SignInResponse,
    summary="Sign in with email and password",
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    body: Credentials,
    context: SessionCtx,
) -> SignInResponse:
    """Exchange credentials for tokens; the profile is created on first sign-in."""
    tokens = await context.sign_in(body.email, body.password)
    session = context.session
    return SignInResponse(
        data=SignInData(
            tokens=TokenResponse.model_validate(tokens),
            session=SessionResponse.from_session(session) if session else None,
        )
    )


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
@limiter.limit(AUTH_LIMIT)  # type: ignore[untyped-decorator]
async def sign_out(request: Request, context: SessionCtx) -> None:
    """Revoke the bearer token's session with the identity provider."""
    await context.sign_out()
    return None
