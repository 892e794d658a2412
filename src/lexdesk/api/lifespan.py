"""Application lifespan: build the container, open and close the store."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..bootstrap import Container, build_container
from ..config.settings import LexdeskSettings

logger = logging.getLogger(__name__)


def create_lifespan(
    settings: Optional[LexdeskSettings] = None,
    container: Optional[Container] = None,
    bootstrap_admin: bool = True,
):
    """Lifespan handler storing the container on ``app.state.container``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = container or build_container(settings)
        await active.startup(bootstrap_admin=bootstrap_admin)
        app.state.container = active
        try:
            yield
        finally:
            await active.shutdown()

    return lifespan
