"""SQLAlchemy implementation of Note repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.note import Note
from infrastructure.database.errors import backend_errors
from infrastructure.database.models import NoteModel


class SQLAlchemyNoteRepository:
    """SQLAlchemy implementation of INoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[Note]:
        """Get every note, oldest first."""
        stmt = select(NoteModel).order_by(NoteModel.created_at)
        with backend_errors("notes.list_all"):
            result = await self._session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars()]

    async def list_for_user(self, user_id: UUID) -> list[Note]:
        """Get all notes owned by a user, oldest first."""
        stmt = (
            select(NoteModel)
            .where(NoteModel.user_id == user_id)
            .order_by(NoteModel.created_at)
        )
        with backend_errors("notes.list_for_user"):
            result = await self._session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars()]

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the notes owned by a user."""
        stmt = select(func.count()).select_from(NoteModel).where(NoteModel.user_id == user_id)
        with backend_errors("notes.count_for_user"):
            result = await self._session.execute(stmt)
            return result.scalar() or 0

    def _to_entity(self, model: NoteModel) -> Note:
        """Convert ORM model to domain entity."""
        return Note(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            content=model.content,
            created_at=model.created_at,
        )
