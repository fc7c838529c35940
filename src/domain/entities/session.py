"""Identity and session value objects."""

from dataclasses import dataclass
from uuid import UUID

from domain.entities.profile import AccountStatus, Profile, ProfileRole, Subscription


@dataclass(frozen=True, slots=True)
class Identity:
    """A user as known to the identity provider."""

    id: UUID
    email: str
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class AuthTokens:
    """Tokens issued by the identity provider on sign-in."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None


@dataclass(frozen=True, slots=True)
class Session:
    """The signed-in identity joined with its resolved profile."""

    identity: Identity
    profile: Profile

    @property
    def id(self) -> UUID:
        return self.identity.id

    @property
    def email(self) -> str:
        return self.identity.email

    @property
    def role(self) -> ProfileRole:
        return self.profile.role

    @property
    def subscription(self) -> Subscription:
        return self.profile.subscription

    @property
    def status(self) -> AccountStatus:
        return self.profile.status

    @property
    def name(self) -> str | None:
        return self.profile.name or self.identity.display_name

    @property
    def is_admin(self) -> bool:
        return self.profile.is_admin
