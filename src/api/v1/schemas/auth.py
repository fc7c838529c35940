"""Pydantic schemas for the auth API."""

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import NoticeResponse
from api.v1.schemas.profile import SessionResponse


class Credentials(BaseModel):
    """Email and password, as accepted by the identity provider."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=72)


class TokenResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None


class SessionStateData(BaseModel):
    """The session as of this request.

    ``loading`` mirrors the session context's flag. The bearer token is
    resolved before any route runs, so over HTTP it is always false; it is
    kept so clients can share one shape with the in-process context.
    """

    session: SessionResponse | None = None
    loading: bool = False


class SessionStateResponse(BaseModel):
    """Current session, or null when signed out."""

    data: SessionStateData


class SignInData(BaseModel):
    tokens: TokenResponse
    session: SessionResponse | None = None


class SignInResponse(BaseModel):
    data: SignInData


class SignUpResponse(BaseModel):
    """Outcome of sign-up; ``data.session`` is null until the email is confirmed."""

    notice: NoticeResponse
    data: SessionStateData
