"""Pydantic schemas for profiles and sessions."""

from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import AccountStatus, ProfileFieldChange, ProfileRole, Subscription
from domain.entities.session import Session


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "ada@example.com",
                "role": "user",
                "subscription": "Free",
                "status": "active",
                "name": "Ada",
                "created_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    email: str
    role: ProfileRole
    subscription: Subscription
    status: AccountStatus
    name: str | None = None
    created_at: datetime


class SessionResponse(BaseModel):
    """The signed-in identity merged with its profile."""

    id: UUID
    email: str
    name: str | None = None
    role: ProfileRole
    subscription: Subscription
    status: AccountStatus
    is_admin: bool

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            id=session.id,
            email=session.email,
            name=session.name,
            role=session.role,
            subscription=session.subscription,
            status=session.status,
            is_admin=session.is_admin,
        )


class RoleUpdate(BaseModel):
    field: Literal["role"]
    value: ProfileRole


class SubscriptionUpdate(BaseModel):
    field: Literal["subscription"]
    value: Subscription


class StatusUpdate(BaseModel):
    field: Literal["status"]
    value: AccountStatus


ProfileFieldUpdate = Annotated[
    Union[RoleUpdate, SubscriptionUpdate, StatusUpdate],
    Field(discriminator="field"),
]


def to_field_change(update: RoleUpdate | SubscriptionUpdate | StatusUpdate) -> ProfileFieldChange:
    """Convert a validated request body into the domain edit."""
    return ProfileFieldChange(field=update.field, value=update.value)
