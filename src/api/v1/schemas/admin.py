"""Pydantic schemas for the admin API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from api.v1.schemas.common import NoticeResponse
from api.v1.schemas.profile import ProfileResponse


class NoteResponse(BaseModel):
    """Schema for Note response (content omitted)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    user_id: UUID
    created_at: datetime


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles."""

    data: list[ProfileResponse]


class NoteListResponse(BaseModel):
    """Schema for list of Notes."""

    data: list[NoteResponse]


class AdminOverviewData(BaseModel):
    users: list[ProfileResponse]
    notes: list[NoteResponse]
    user_count: int
    note_count: int


class AdminOverviewResponse(BaseModel):
    """Schema for the admin console landing data."""

    data: AdminOverviewData


class ProfileActionResponse(BaseModel):
    """Outcome of an admin edit plus the refetched profile list."""

    notice: NoticeResponse
    data: list[ProfileResponse]


class ProfileDeletionData(BaseModel):
    users: list[ProfileResponse]
    orphaned_notes: int


class ProfileDeletionResponse(BaseModel):
    """Outcome of an admin deletion plus the refetched profile list."""

    notice: NoticeResponse
    data: ProfileDeletionData
