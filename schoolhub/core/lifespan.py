"""Application lifespan: startup and shutdown wiring only."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from schoolhub.core.config import get_settings
from schoolhub.infrastructure.persistence.database import dispose_engine, init_models
from schoolhub.middleware.audit_log import drain_pending_audit_writes
from schoolhub.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: logging, then tables when DATABASE_AUTO_CREATE is set.

    Shutdown: let in-flight audit writes finish, then dispose the engine.
    """
    settings = get_settings()
    setup_logging()

    if settings.database_auto_create:
        await init_models()

    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    await drain_pending_audit_writes()
    await dispose_engine()
