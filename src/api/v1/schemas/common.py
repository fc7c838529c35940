"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from domain.entities.notice import NoticeVariant


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class NoticeResponse(BaseModel):
    """Outcome message for a console action, meant to be shown as a toast."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "title": "User Updated",
                "description": "User status has been updated successfully.",
                "variant": "default",
            }
        },
    )

    title: str
    description: str
    variant: NoticeVariant

