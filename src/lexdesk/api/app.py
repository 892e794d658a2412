"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI

from ..__version__ import __version__
from ..bootstrap import Container
from ..config.logging_config import LoggingConfig
from ..config.settings import LexdeskSettings, get_settings
from .exception_handlers import register_exception_handlers
from .lifespan import create_lifespan
from .routers import router


def create_app(
    settings: Optional[LexdeskSettings] = None,
    container: Optional[Container] = None,
    bootstrap_admin: bool = True,
) -> FastAPI:
    """Build the application.

    Authentication is expected to run in front of these routes and set
    ``tenant_id``, ``user_id`` and ``account_type`` on ``request.state``.
    """
    settings = settings or (container.settings if container else get_settings())
    LoggingConfig.configure(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=create_lifespan(settings, container, bootstrap_admin),
    )
    register_exception_handlers(app, debug=settings.debug and not settings.is_production)
    app.include_router(router, prefix="/api/v1")
    return app
