"""
Application lifecycle events
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from .config import settings
from .database import init_db, close_db
from .logging import setup_logging

logger = logging.getLogger(__name__)

async def on_startup() -> None:
    """Configure logging and bring the schema up"""
    setup_logging()
    logger.info(
        "Starting %s %s (environment=%s)",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.ENVIRONMENT
    )
    await init_db()

async def on_shutdown() -> None:
    await close_db()
    logger.info("%s stopped", settings.APP_NAME)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await on_startup()
    try:
        yield
    finally:
        await on_shutdown()
