"""FastAPI application for the venue FAQ bot."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from api.routes import messages
from api.routes.health import router as health_router
from config.logging_config import setup_logging
from config.settings import settings
from core.dependencies import init_dependencies, shutdown_dependencies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises ConfigurationError if LUIS or a knowledge base is not configured
    init_dependencies()
    logger.info(f"Bot ready (state storage: {settings.STATE_STORAGE})")
    yield
    await shutdown_dependencies()
    logger.info("LUIS and QnA clients closed")


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Venue FAQ Bot API",
        description="Answers event questions from per-venue knowledge bases",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(health_router, tags=["Health"])
    app.include_router(messages.router, prefix="/api", tags=["Messages"])
    return app
