"""Usage analytics API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import ActiveSession
from api.v1.dependencies import get_analytics_service
from api.v1.schemas.analytics import (
    AnalyticsData,
    AnalyticsResponse,
    DailyCountResponse,
    NotesPerDayResponse,
    StorageResponse,
    StorageUsageResponse,
)
from core.rate_limit import READ_LIMIT, limiter
from domain.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsResponse, summary="Usage analytics")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_analytics(
    request: Request,
    session: ActiveSession,
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """Notes created per day and estimated storage use for the signed-in user."""
    report = await service.get_report(session)
    return AnalyticsResponse(data=AnalyticsData.model_validate(report))


@router.get(
    "/notes-per-day",
    response_model=NotesPerDayResponse,
    summary="Notes created per day",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_notes_per_day(
    request: Request,
    session: ActiveSession,
    service: AnalyticsService = Depends(get_analytics_service),
) -> NotesPerDayResponse:
    """One entry per calendar day that has notes, in no guaranteed order."""
    histogram = await service.get_notes_per_day(session)
    return NotesPerDayResponse(data=[DailyCountResponse.model_validate(d) for d in histogram])


@router.get("/storage", response_model=StorageResponse, summary="Estimated storage use")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_storage(
    request: Request,
    session: ActiveSession,
    service: AnalyticsService = Depends(get_analytics_service),
) -> StorageResponse:
    """Two bytes per character of note content, against a display-only quota."""
    usage = await service.get_storage_usage(session)
    return StorageResponse(data=StorageUsageResponse.model_validate(usage))
