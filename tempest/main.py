from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from tempest.core.config import settings
from tempest.core.init_db import init_db
from tempest.core.logging import setup_logging
from tempest.routers.health import router as health_router
from tempest.routers.weather import router as weather_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging and create the observation table on startup.
    """
    setup_logging(settings.log_level)
    await init_db()
    logger.info("api.started", environment=settings.environment)
    yield
    logger.info("api.stopped")


def create_app() -> FastAPI:
    """
    Build the read API over the observation store.

    The UDP listener runs as its own process (`tempest listen`); this app
    only reads what it stored and accepts forwarded observations.
    """
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Weather station API: latest and recent observations",
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(weather_router)

    return app


app = create_app()
