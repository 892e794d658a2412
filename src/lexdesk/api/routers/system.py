"""Health endpoint."""

from fastapi import APIRouter, Depends

from ...bootstrap import Container
from ..dependencies import get_container

router = APIRouter()


@router.get("/health")
async def health(container: Container = Depends(get_container)):
    healthy = await container.store.health_check() if hasattr(container.store, "health_check") else True
    return {"status": "healthy" if healthy else "unhealthy", "app": container.settings.app_name}
