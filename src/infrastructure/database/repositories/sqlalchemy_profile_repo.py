"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.errors import backend_errors
from infrastructure.database.models import ProfileModel

UPDATABLE_FIELDS = frozenset({"email", "role", "subscription", "status", "name"})


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by identity ID."""
        with backend_errors("profiles.get"):
            model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Profile]:
        """Get every profile, oldest first."""
        stmt = select(ProfileModel).order_by(ProfileModel.created_at)
        with backend_errors("profiles.list_all"):
            result = await self._session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars()]

    async def create_if_absent(self, profile: Profile) -> Profile:
        """Insert the profile unless its ID is taken, then return the stored row.

        Uses INSERT ... ON CONFLICT DO NOTHING so two concurrent first
        sign-ins cannot overwrite each other; the first writer wins.
        """
        values = self._to_values(profile)
        values["id"] = profile.id
        values["created_at"] = profile.created_at
        with backend_errors("profiles.create_if_absent"):
            stmt = (
                self._insert()(ProfileModel)
                .values(**values)
                .on_conflict_do_nothing(index_elements=[ProfileModel.id])
            )
            await self._session.execute(stmt)
            await self._session.flush()
            model = await self._get_model(profile.id, refresh=True)
        if model is None:
            raise RuntimeError(f"Profile {profile.id} missing after conditional insert")
        return self._to_entity(model)

    async def save(self, profile: Profile) -> Profile:
        """Insert or overwrite a profile."""
        with backend_errors("profiles.save"):
            model = await self._get_model(profile.id)
            if model is None:
                model = self._to_model(profile)
                self._session.add(model)
            else:
                for key, value in self._to_values(profile).items():
                    setattr(model, key, value)
            await self._session.flush()
            await self._session.refresh(model)
        return self._to_entity(model)

    async def update_fields(self, id: UUID, **fields: Any) -> Profile | None:
        """Write the given fields onto an existing profile."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update profile fields: {sorted(unknown)}")

        with backend_errors("profiles.update_fields"):
            model = await self._get_model(id)
            if not model:
                return None
            for key, value in fields.items():
                setattr(model, key, str(value) if value is not None else None)
            model.updated_at = datetime.utcnow()
            await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a profile."""
        with backend_errors("profiles.delete"):
            model = await self._get_model(id)
            if not model:
                return False
            await self._session.delete(model)
            await self._session.flush()
        return True

    async def _get_model(self, id: UUID, refresh: bool = False) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _insert(self) -> Any:
        """Pick the dialect-specific insert that supports ON CONFLICT."""
        if self._session.get_bind().dialect.name == "sqlite":
            return sqlite_insert
        return pg_insert

    def _to_values(self, entity: Profile) -> dict[str, Any]:
        return {
            "email": entity.email,
            "role": entity.role.value,
            "subscription": entity.subscription.value,
            "status": entity.status.value,
            "name": entity.name,
            "updated_at": entity.updated_at,
        }

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            role=model.role,
            subscription=model.subscription,
            status=model.status,
            name=model.name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            created_at=entity.created_at,
            **self._to_values(entity),
        )
