"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.analytics import router as analytics_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.settings import router as settings_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(admin_router)
router.include_router(analytics_router)
router.include_router(settings_router)
