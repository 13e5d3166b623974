from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from loggers import get_logger
from src.core.database.engine import engine
from src.main.config import config
from src.main.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    init_sentry()
    if not config.app.TESTING and not config.broadcasting.is_configured:
        logger.warning("EMAIL_* settings are incomplete; origin change alerts are off")
    logger.info(
        "Access tokens signed with %s, valid for %s minutes",
        config.jwt.ALGORITHM,
        config.jwt.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

    yield

    await engine.dispose()
    logger.info("Database engine disposed")
