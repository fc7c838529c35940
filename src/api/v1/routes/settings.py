"""Account settings API routes."""

from fastapi import APIRouter, Depends, Query, Request, Response

from api.dependencies.auth import ActiveSession, CurrentSession, SessionCtx
from api.v1.dependencies import get_settings_service
from api.v1.schemas.common import ErrorResponse, NoticeResponse
from api.v1.schemas.settings import (
    AccountDeletionData,
    AccountDeletionResponse,
    AccountSettingsResponse,
    SettingsActionResponse,
    SettingsResponse,
    SettingsUpdate,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.account import AccountSettings
from domain.entities.notice import ActionResult
from domain.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


def _action_response(
    response: Response, result: ActionResult[AccountSettings | None]
) -> SettingsActionResponse:
    if result.error is not None:
        response.status_code = result.error.status_code
    return SettingsActionResponse(
        notice=NoticeResponse.model_validate(result.notice),
        data=AccountSettingsResponse.model_validate(result.data) if result.data else None,
    )


@router.get("", response_model=SettingsResponse, summary="Get account settings")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_settings(
    request: Request,
    session: ActiveSession,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    settings = await service.get_settings(session)
    return SettingsResponse(data=AccountSettingsResponse.model_validate(settings))


@router.patch("", response_model=SettingsActionResponse, summary="Update account settings")
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_settings(
    request: Request,
    response: Response,
    body: SettingsUpdate,
    session: ActiveSession,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsActionResponse:
    """Save the display name. Email and subscription cannot be changed here."""
    return _action_response(response, await service.update_name(session, body.name))


@router.post(
    "/subscription/cancel",
    response_model=SettingsActionResponse,
    summary="Cancel subscription",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def cancel_subscription(
    request: Request,
    response: Response,
    session: ActiveSession,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsActionResponse:
    """Reset the subscription to Free regardless of the current tier."""
    return _action_response(response, await service.cancel_subscription(session))


@router.delete(
    "/account",
    response_model=AccountDeletionResponse,
    summary="Delete account",
    responses={
        200: {"description": "Profile deleted and signed out"},
        400: {"model": ErrorResponse, "description": "Missing confirm=true"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_account(
    request: Request,
    response: Response,
    session: CurrentSession,
    context: SessionCtx,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    service: SettingsService = Depends(get_settings_service),
) -> AccountDeletionResponse:
    """Delete the caller's profile, then sign out.

    The sign-in identity and the caller's notes are kept.
    """
    result = await service.delete_account(context, confirmed=confirm)
    if result.error is not None:
        response.status_code = result.error.status_code
    return AccountDeletionResponse(
        notice=NoticeResponse.model_validate(result.notice),
        data=AccountDeletionData.model_validate(result.data) if result.data else None,
    )
