"""Admin console API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from api.dependencies.auth import ActiveSession
from api.v1.dependencies import get_admin_service
from api.v1.schemas.admin import (
    AdminOverviewData,
    AdminOverviewResponse,
    NoteListResponse,
    NoteResponse,
    ProfileActionResponse,
    ProfileDeletionData,
    ProfileDeletionResponse,
    ProfileListResponse,
)
from api.v1.schemas.common import ErrorResponse, NoticeResponse
from api.v1.schemas.profile import ProfileFieldUpdate, ProfileResponse, to_field_change
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])

_ADMIN_ONLY = {403: {"model": ErrorResponse, "description": "Access denied. Admin only."}}


@router.get(
    "/overview",
    response_model=AdminOverviewResponse,
    summary="List all users and notes",
    responses=_ADMIN_ONLY,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_overview(
    request: Request,
    session: ActiveSession,
    service: AdminService = Depends(get_admin_service),
) -> AdminOverviewResponse:
    """Every profile and every note, unfiltered. Admin only."""
    overview = await service.get_overview(session)
    return AdminOverviewResponse(
        data=AdminOverviewData(
            users=[ProfileResponse.model_validate(p) for p in overview.profiles],
            notes=[NoteResponse.model_validate(n) for n in overview.notes],
            user_count=len(overview.profiles),
            note_count=len(overview.notes),
        )
    )


@router.get(
    "/users",
    response_model=ProfileListResponse,
    summary="List all users",
    responses=_ADMIN_ONLY,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    session: ActiveSession,
    service: AdminService = Depends(get_admin_service),
) -> ProfileListResponse:
    profiles = await service.list_profiles(session)
    return ProfileListResponse(data=[ProfileResponse.model_validate(p) for p in profiles])


@router.get(
    "/notes",
    response_model=NoteListResponse,
    summary="List all notes",
    responses=_ADMIN_ONLY,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_notes(
    request: Request,
    session: ActiveSession,
    service: AdminService = Depends(get_admin_service),
) -> NoteListResponse:
    notes = await service.list_notes(session)
    return NoteListResponse(data=[NoteResponse.model_validate(n) for n in notes])


@router.patch(
    "/users/{user_id}",
    response_model=ProfileActionResponse,
    summary="Change a user's role, subscription or status",
    responses={
        200: {"description": "User updated; refreshed user list returned"},
        404: {"description": "User not found; refreshed user list returned"},
        422: {"model": ErrorResponse, "description": "Field or value outside the allowed set"},
        502: {"description": "Write failed; refreshed user list returned"},
        **_ADMIN_ONLY,
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_user(
    request: Request,
    response: Response,
    user_id: UUID,
    body: ProfileFieldUpdate,
    session: ActiveSession,
    service: AdminService = Depends(get_admin_service),
) -> ProfileActionResponse:
    """Write one field. The user list is refetched even when the write fails."""
    result = await service.update_profile_field(session, user_id, to_field_change(body))
    if result.error is not None:
        response.status_code = result.error.status_code
    return ProfileActionResponse(
        notice=NoticeResponse.model_validate(result.notice),
        data=[ProfileResponse.model_validate(p) for p in result.data],
    )


@router.delete(
    "/users/{user_id}",
    response_model=ProfileDeletionResponse,
    summary="Delete a user's profile",
    responses={
        200: {"description": "Profile deleted; identity and notes are kept"},
        400: {"model": ErrorResponse, "description": "Missing confirm=true"},
        404: {"description": "User not found; refreshed user list returned"},
        **_ADMIN_ONLY,
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_user(
    request: Request,
    response: Response,
    user_id: UUID,
    session: ActiveSession,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    service: AdminService = Depends(get_admin_service),
) -> ProfileDeletionResponse:
    """Delete the profile document only; the user's notes become orphaned."""
    result = await service.delete_profile(session, user_id, confirmed=confirm)
    if result.error is not None:
        response.status_code = result.error.status_code
    return ProfileDeletionResponse(
        notice=NoticeResponse.model_validate(result.notice),
        data=ProfileDeletionData(
            users=[ProfileResponse.model_validate(p) for p in result.data.profiles],
            orphaned_notes=result.data.orphaned_notes,
        ),
    )
