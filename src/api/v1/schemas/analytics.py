"""Pydantic schemas for the analytics API."""

from pydantic import BaseModel, ConfigDict


class DailyCountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    count: int


class StorageUsageResponse(BaseModel):
    """Approximate storage figures in megabytes."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {"used_mb": 0.95, "total_mb": 1000, "free_mb": 999.05}
        },
    )

    used_mb: float
    total_mb: float
    free_mb: float


class AnalyticsData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notes_per_day: list[DailyCountResponse]
    storage: StorageUsageResponse


class AnalyticsResponse(BaseModel):
    data: AnalyticsData


class NotesPerDayResponse(BaseModel):
    data: list[DailyCountResponse]


class StorageResponse(BaseModel):
    data: StorageUsageResponse
