"""Master API router — includes all sub-routers."""

from fastapi import APIRouter

from .routes.dashboard import router as dashboard_router
from .routes.install import router as install_router
from .routes.notifications import router as notifications_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(dashboard_router)
api_router.include_router(notifications_router)
api_router.include_router(install_router)
