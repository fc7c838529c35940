"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.services import get_uow_factory
from core.config import settings
from domain.services.admin_service import AdminService
from domain.services.analytics_service import AnalyticsService
from domain.services.settings_service import SettingsService


@lru_cache
def get_admin_service() -> AdminService:
    """Get Admin service instance."""
    return AdminService(get_uow_factory())


@lru_cache
def get_analytics_service() -> AnalyticsService:
    """Get Analytics service instance."""
    return AnalyticsService(
        get_uow_factory(),
        storage_quota_mb=settings.storage_quota_mb,
        timezone_name=settings.analytics_timezone,
    )


@lru_cache
def get_settings_service() -> SettingsService:
    """Get Settings service instance."""
    return SettingsService(get_uow_factory())
