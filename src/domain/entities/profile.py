"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ProfileRole(StrEnum):
    """Console role stored on a profile."""

    USER = "user"
    ADMIN = "admin"


class Subscription(StrEnum):
    """Subscription tier stored on a profile."""

    FREE = "Free"
    PREMIUM = "Premium"
    ADMIN = "Admin"


class AccountStatus(StrEnum):
    """Moderation status stored on a profile."""

    ACTIVE = "active"
    BANNED = "banned"
    DISABLED = "disabled"


@dataclass
class Profile:
    """Domain entity for a user profile, keyed by the identity provider's user id."""

    id: UUID
    email: str = ""
    role: ProfileRole = ProfileRole.USER
    subscription: Subscription = Subscription.FREE
    status: AccountStatus = AccountStatus.ACTIVE
    name: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Coerce stored strings to enums and keep timestamps ordered."""
        self.role = ProfileRole(self.role)
        self.subscription = Subscription(self.subscription)
        self.status = AccountStatus(self.status)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @classmethod
    def bootstrap(cls, id: UUID, email: str, admin_email: str) -> "Profile":
        """Build the profile written on an identity's first observed session.

        The configured administrator address gets the admin role and tier;
        everybody else starts as a free user.
        """
        is_admin = email == admin_email
        return cls(
            id=id,
            email=email,
            role=ProfileRole.ADMIN if is_admin else ProfileRole.USER,
            subscription=Subscription.ADMIN if is_admin else Subscription.FREE,
        )

    @classmethod
    def for_sign_up(cls, id: UUID, email: str) -> "Profile":
        """Build the profile written right after credential creation."""
        return cls(id=id, email=email)


_FIELD_TYPES: dict[str, type[StrEnum]] = {
    "role": ProfileRole,
    "subscription": Subscription,
    "status": AccountStatus,
}


@dataclass(frozen=True, slots=True)
class ProfileFieldChange:
    """An admin edit of one enumerated profile field.

    Only ``role``, ``subscription`` and ``status`` can be changed this way and
    the value must belong to that field's enumeration.
    """

    field: str
    value: StrEnum

    def __post_init__(self) -> None:
        enum_type = _FIELD_TYPES.get(self.field)
        if enum_type is None:
            raise ValueError(f"Profile field '{self.field}' cannot be edited")
        # Raises ValueError for values outside the enumeration
        object.__setattr__(self, "value", enum_type(self.value))
