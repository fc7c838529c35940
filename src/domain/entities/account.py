"""Value objects for the admin and settings views."""

from dataclasses import dataclass

from domain.entities.note import Note
from domain.entities.profile import Profile


@dataclass(frozen=True, slots=True)
class AdminOverview:
    """Everything the admin console lists: all profiles and all notes."""

    profiles: list[Profile]
    notes: list[Note]


@dataclass(frozen=True, slots=True)
class ProfileDeletion:
    """Profiles left after an admin deletion, plus the notes it orphaned."""

    profiles: list[Profile]
    orphaned_notes: int = 0


@dataclass(frozen=True, slots=True)
class AccountSettings:
    """The editable and read-only fields shown on the settings view."""

    name: str
    email: str
    subscription: str


@dataclass(frozen=True, slots=True)
class AccountDeletion:
    """Result of the self-service deletion workflow.

    Only the profile is removed. The identity record and the owner's notes
    stay behind; ``orphaned_notes`` says how many notes were left.
    """

    orphaned_notes: int
    redirect_to: str = "/"
