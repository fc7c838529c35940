"""Usage analytics for the signed-in user's notes."""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timezone, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

from domain.entities.analytics import AnalyticsReport, DailyCount, StorageUsage
from domain.entities.note import Note
from domain.entities.session import Session
from domain.repositories.unit_of_work import IUnitOfWork

# Rough estimate: two bytes per character
BYTES_PER_CHAR = 2
BYTES_PER_MB = 1024 * 1024


def _local_date(created_at: datetime, tz: tzinfo) -> str:
    # Stored timestamps are naive UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(tz).date().isoformat()


def build_daily_histogram(notes: Iterable[Note], tz: tzinfo = timezone.utc) -> list[DailyCount]:
    """Count notes per calendar day of creation.

    Days appear in the order first seen; days without notes are not
    filled in.
    """
    counts = Counter(_local_date(note.created_at, tz) for note in notes)
    return [DailyCount(date=day, count=count) for day, count in counts.items()]


def estimate_storage(notes: Iterable[Note], total_mb: float) -> StorageUsage:
    """Approximate the megabytes used by note content against a display quota."""
    used_bytes = sum(len(note.content or "") * BYTES_PER_CHAR for note in notes)
    return StorageUsage(used_mb=used_bytes / BYTES_PER_MB, total_mb=total_mb)


class AnalyticsService:
    """Service layer for the analytics view."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage_quota_mb: float,
        timezone_name: str = "UTC",
    ) -> None:
        self._uow_factory = uow_factory
        self._storage_quota_mb = storage_quota_mb
        self._tz = ZoneInfo(timezone_name)

    async def get_report(self, session: Session) -> AnalyticsReport:
        """Histogram and storage estimate from a single read of the owner's notes."""
        notes = await self._owned_notes(session)
        return AnalyticsReport(
            notes_per_day=build_daily_histogram(notes, self._tz),
            storage=estimate_storage(notes, self._storage_quota_mb),
        )

    async def get_notes_per_day(self, session: Session) -> list[DailyCount]:
        return build_daily_histogram(await self._owned_notes(session), self._tz)

    async def get_storage_usage(self, session: Session) -> StorageUsage:
        return estimate_storage(await self._owned_notes(session), self._storage_quota_mb)

    async def _owned_notes(self, session: Session) -> list[Note]:
        async with self._uow_factory() as uow:
            return await uow.notes.list_for_user(session.id)  # type: ignore[no-any-return]
