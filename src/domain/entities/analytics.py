"""Analytics value objects."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DailyCount:
    """Number of notes created on one calendar day."""

    date: str
    count: int


@dataclass(frozen=True, slots=True)
class StorageUsage:
    """Approximate storage used by a user's notes, in megabytes."""

    used_mb: float
    total_mb: float

    @property
    def free_mb(self) -> float:
        return self.total_mb - self.used_mb


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    notes_per_day: list[DailyCount]
    storage: StorageUsage
