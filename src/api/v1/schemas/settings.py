"""Pydantic schemas for the settings API."""

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import NoticeResponse


class SettingsUpdate(BaseModel):
    """Schema for updating settings. Only the name is editable."""

    name: str = Field(..., max_length=100)


class AccountSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str
    subscription: str


class SettingsResponse(BaseModel):
    data: AccountSettingsResponse


class SettingsActionResponse(BaseModel):
    notice: NoticeResponse
    data: AccountSettingsResponse | None = None


class AccountDeletionData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    redirect_to: str
    orphaned_notes: int


class AccountDeletionResponse(BaseModel):
    notice: NoticeResponse
    data: AccountDeletionData | None = None
