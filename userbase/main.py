"""User management API - FastAPI Entry Point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import config
from .database import init_db
from .errors import register_exception_handlers
from .logging_config import setup_logging

# Import routers
from .routes.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging(config.LOG_LEVEL, use_json_format=config.LOG_JSON)
    init_db()
    logger.info("Database ready", extra={"context": {"path": str(config.DATABASE_PATH)}})
    yield


app = FastAPI(title="Userbase", lifespan=lifespan)

register_exception_handlers(app)

# Include routers
app.include_router(users_router)
