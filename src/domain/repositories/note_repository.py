"""Note repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.note import Note


class INoteRepository(Protocol):
    """Read-only repository interface for Note entities."""

    async def list_all(self) -> list[Note]:
        """Get every note (full scan, no paging)."""
        ...

    async def list_for_user(self, user_id: UUID) -> list[Note]:
        """Get all notes owned by a user."""
        ...

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the notes owned by a user."""
        ...
