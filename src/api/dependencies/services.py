"""Service factories shared by the auth dependencies and the v1 routers."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.session_service import SessionService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_session_service() -> SessionService:
    """Get Session service instance."""
    return SessionService(get_uow_factory(), admin_email=settings.admin_email)
