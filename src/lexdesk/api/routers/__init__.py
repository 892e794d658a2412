"""API v1 router - combines all sub-routers."""

from fastapi import APIRouter

from . import dashboard, system

router = APIRouter()

router.include_router(system.router, tags=["System"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
