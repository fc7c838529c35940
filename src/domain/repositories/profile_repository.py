"""Profile repository protocol."""

from typing import Any, Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by identity ID."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get every profile (full scan, no paging)."""
        ...

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless one exists for its ID; return the stored one."""
        ...

    async def save(self, profile: Profile) -> Profile:
        """Insert or overwrite a profile (last write wins)."""
        ...

    async def update_fields(self, id: UUID, **fields: Any) -> Profile | None:
        """Write the given fields; None if the profile does not exist."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a profile and return success status."""
        ...
